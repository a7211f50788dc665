from datetime import timezone
from app.models.base import Base, TimestampMixin, utcnow


def test_base_has_metadata():
    assert Base.metadata is not None


def test_timestamp_mixin_has_fields():
    assert hasattr(TimestampMixin, "created_at")
    assert hasattr(TimestampMixin, "updated_at")


def test_utcnow_is_timezone_aware():
    assert utcnow().tzinfo == timezone.utc

"""Per-user LeetCode session storage with a single active session per user."""
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import SecretCipher
from app.models.session import LeetCodeSession
from app.services.leetcode.client import LeetCodeAuth, LeetCodeClient

logger = logging.getLogger(__name__)


class SessionStoreError(Exception):
    """Storing a session would leave more than one active session."""
    pass


@dataclass(frozen=True)
class SessionCredential:
    """Handle to a stored session. Holds ciphertext only; decrypt on demand."""
    session_id: UUID
    user_id: UUID
    session_data: str
    csrf_token: str | None = None

    @classmethod
    def from_record(cls, record: LeetCodeSession) -> "SessionCredential":
        return cls(
            session_id=record.id,
            user_id=record.user_id,
            session_data=record.session_data,
            csrf_token=record.csrf_token,
        )

    def decrypt(self, cipher: SecretCipher) -> dict:
        return json.loads(cipher.decrypt(self.session_data))

    def auth(self, cipher: SecretCipher) -> LeetCodeAuth:
        """Build per-request auth from the decrypted payload."""
        payload = self.decrypt(cipher)
        cookie = payload.get("LEETCODE_SESSION") or payload.get("sessionCookie")
        if not cookie:
            raise ValueError("Session payload has no LEETCODE_SESSION cookie")
        if self.csrf_token:
            csrf_token = cipher.decrypt(self.csrf_token)
        else:
            csrf_token = payload.get("csrfToken")
        return LeetCodeAuth(session_cookie=cookie, csrf_token=csrf_token)


class LeetCodeSessionManager:
    """Creates, reuses, validates and invalidates users' LeetCode sessions."""

    def __init__(self, db: AsyncSession, client: LeetCodeClient, cipher: SecretCipher):
        self.db = db
        self.client = client
        self.cipher = cipher

    async def get_active_session(self, user_id: UUID) -> SessionCredential | None:
        """Most recently used reusable session for the user; bumps last_used_at."""
        now = datetime.now(timezone.utc)
        result = await self.db.execute(
            select(LeetCodeSession)
            .where(
                LeetCodeSession.user_id == user_id,
                LeetCodeSession.is_active.is_(True),
                or_(
                    LeetCodeSession.expires_at.is_(None),
                    LeetCodeSession.expires_at > now,
                ),
            )
            .order_by(LeetCodeSession.last_used_at.desc())
            .limit(1)
        )
        session = result.scalar_one_or_none()
        if session is None:
            return None

        session.last_used_at = now
        await self.db.commit()
        return SessionCredential.from_record(session)

    async def store_session(
        self,
        user_id: UUID,
        session_data: dict,
        expires_at: datetime | None = None,
    ) -> LeetCodeSession:
        """
        Encrypt and store a new session, superseding any active one.

        Deactivation of the previous sessions and the insert are committed
        together, after checking that the new row is the only active one.

        Raises:
            SessionStoreError: another active session remained after deactivation
        """
        encrypted_data = self.cipher.encrypt(json.dumps(session_data))
        csrf_token = session_data.get("csrfToken")
        encrypted_csrf = self.cipher.encrypt(csrf_token) if csrf_token else None

        try:
            await self.db.execute(
                update(LeetCodeSession)
                .where(
                    LeetCodeSession.user_id == user_id,
                    LeetCodeSession.is_active.is_(True),
                )
                .values(is_active=False)
            )

            session = LeetCodeSession(
                user_id=user_id,
                session_data=encrypted_data,
                csrf_token=encrypted_csrf,
                is_active=True,
                expires_at=expires_at,
            )
            self.db.add(session)
            await self.db.flush()

            others_active = await self.db.scalar(
                select(func.count())
                .select_from(LeetCodeSession)
                .where(
                    LeetCodeSession.user_id == user_id,
                    LeetCodeSession.is_active.is_(True),
                    LeetCodeSession.id != session.id,
                )
            )
            if others_active:
                raise SessionStoreError(
                    f"{others_active} active session(s) remain for user {user_id}"
                )

            await self.db.commit()
        except (SQLAlchemyError, SessionStoreError):
            await self.db.rollback()
            raise

        logger.info(f"LeetCode session stored for user: {user_id}")
        return session

    async def validate_session(self, credential: SessionCredential, username: str) -> bool:
        """Check the session against LeetCode. Never raises."""
        try:
            auth = credential.auth(self.cipher)
            calendar = await self.client.user_calendar(
                username, datetime.now(timezone.utc).year, auth
            )
        except Exception as e:
            logger.warning(f"Session validation failed: {e}")
            return False
        return calendar is not None

    async def invalidate_session(self, user_id: UUID) -> None:
        """Deactivate every session for the user. No-op if none are active."""
        result = await self.db.execute(
            update(LeetCodeSession)
            .where(
                LeetCodeSession.user_id == user_id,
                LeetCodeSession.is_active.is_(True),
            )
            .values(is_active=False)
        )
        await self.db.commit()
        logger.info(f"Invalidated {result.rowcount} LeetCode session(s) for user: {user_id}")

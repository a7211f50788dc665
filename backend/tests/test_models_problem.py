from app.models.problem import ProblemMetadata, Difficulty


def test_problem_metadata_table_name():
    assert ProblemMetadata.__tablename__ == "problem_metadata"


def test_problem_metadata_slug_is_unique():
    assert ProblemMetadata.__table__.c.title_slug.unique is True


def test_difficulty_values():
    assert Difficulty.EASY.value == "Easy"
    assert Difficulty.MEDIUM.value == "Medium"
    assert Difficulty.HARD.value == "Hard"
    assert Difficulty.UNKNOWN.value == "Unknown"


def test_difficulty_parse_known_values():
    assert Difficulty.parse("Easy") == Difficulty.EASY
    assert Difficulty.parse("Hard") == Difficulty.HARD


def test_difficulty_parse_falls_back_to_unknown():
    assert Difficulty.parse(None) == Difficulty.UNKNOWN
    assert Difficulty.parse("Impossible") == Difficulty.UNKNOWN

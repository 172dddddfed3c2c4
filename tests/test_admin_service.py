import pytest

from merge_api.models.snippet.language_volume_model import LanguageStatus
from merge_api.models.snippet.snippet_model import Difficulty, Snippet
from merge_api.schemas.snippet_schema import SnippetCreate
from merge_api.services.admin_service import AdminError, AdminService
from tests.utils import create_admin, create_game, create_language, create_snippets, create_user


def _service(db):
    return AdminService(db, create_admin(db))


def test_add_snippet_increments_counter(db_session):
    language = create_language(db_session, "python")
    service = _service(db_session)

    snippet = service.add_snippet(
        SnippetCreate(
            language="Python",
            code="print('hi')",
            is_valid=True,
            difficulty=Difficulty.EASY,
            explanation="prints",
            tags=["io"],
        )
    )

    assert snippet.language == "python"
    assert snippet.created_by_id == service.admin.id
    db_session.refresh(language)
    assert language.snippet_count == 1
    assert language.ai_generated_count == 0


def test_delete_snippet_decrements_counters_without_going_negative(db_session):
    language = create_language(db_session, "python", snippet_count=1, ai_generated_count=0)
    ai_snippet, manual_snippet = create_snippets(db_session, [True, False], language="python")
    ai_snippet.ai_generated = True
    db_session.commit()
    service = _service(db_session)

    service.delete_snippet(ai_snippet.id)
    service.delete_snippet(manual_snippet.id)

    db_session.refresh(language)
    assert language.snippet_count == 0
    assert language.ai_generated_count == 0
    assert db_session.query(Snippet).count() == 0


def test_delete_unknown_snippet(db_session):
    with pytest.raises(AdminError) as exc:
        _service(db_session).delete_snippet(123)
    assert exc.value.code == "snippet_not_found"
    assert exc.value.status_code == 404


def test_update_snippet_ignores_unknown_fields(db_session):
    (snippet,) = create_snippets(db_session, [True])

    updated = _service(db_session).update_snippet(
        snippet.id,
        {"is_valid": False, "explanation": "off by one", "tags": ("loops",), "language": "rust"},
    )

    assert updated.is_valid is False
    assert updated.explanation == "off by one"
    assert updated.tags == ["loops"]
    assert updated.language == "typescript"


def test_list_snippets_filters_by_volume(db_session):
    create_snippets(db_session, [True, False])
    create_snippets(db_session, [True], volume=2)
    service = _service(db_session)

    assert len(service.list_snippets("TypeScript")) == 3
    assert len(service.list_snippets("typescript", volume=2)) == 1


def test_add_language_rejects_duplicates(db_session):
    service = _service(db_session)

    language = service.add_language("C++", "C++", icon="cpp-icon")
    assert language.language == "cpp"
    assert language.status == LanguageStatus.ACTIVE
    assert language.current_volume == 1

    with pytest.raises(AdminError) as exc:
        service.add_language("cpp", "C++")
    assert exc.value.code == "language_already_exists"
    assert exc.value.status_code == 409


def test_set_current_volume_recounts_snippets(db_session):
    language = create_language(db_session, "typescript", snippet_count=42)
    create_snippets(db_session, [True, False, True])

    updated = _service(db_session).set_current_volume("typescript", 3)

    assert updated.id == language.id
    assert updated.current_volume == 3
    assert updated.snippet_count == 3


def test_create_new_volume_rotates_or_creates(db_session):
    create_language(db_session, "typescript", current_volume=2, snippet_count=10, ai_generated_count=4)
    service = _service(db_session)

    rotated = service.create_new_volume("typescript")
    assert rotated.current_volume == 3
    assert rotated.snippet_count == 0
    assert rotated.ai_generated_count == 0

    created = service.create_new_volume("Kotlin")
    assert created.language == "kotlin"
    assert created.current_volume == 1


def test_status_and_icon_updates(db_session):
    create_language(db_session, "go")
    service = _service(db_session)

    assert service.set_language_status("go", LanguageStatus.PAUSED).status == LanguageStatus.PAUSED
    updated = service.set_language_icon("go", "gopher", "#00ADD8")
    assert updated.icon == "gopher"
    assert updated.icon_color == "#00ADD8"

    with pytest.raises(AdminError) as exc:
        service.set_language_status("cobol", LanguageStatus.ACTIVE)
    assert exc.value.code == "language_not_found"


def test_recount_normalizes_names_and_fixes_drift(db_session):
    create_language(db_session, "Python", snippet_count=99)
    create_snippets(db_session, [True, True], language="python")
    create_snippets(db_session, [False], language="python", ai_generated=True)

    volumes = _service(db_session).recount_snippet_counts()

    (python,) = volumes
    assert python.language == "python"
    assert python.snippet_count == 3
    assert python.ai_generated_count == 1


def test_dashboard_stats(db_session):
    player = create_user(db_session)
    typescript = create_snippets(db_session, [True, True, True])
    python = create_snippets(db_session, [True, True, True], language="python")
    create_game(db_session, player, typescript, [True, True, True])
    create_game(db_session, player, typescript, [True, False, False])
    create_game(db_session, player, python, [False, False, False])

    stats = _service(db_session).dashboard_stats()

    assert stats["total_users"] == 2
    assert stats["total_games"] == 3
    assert stats["average_score"] == pytest.approx(4 / 3)
    assert stats["language_stats"] == [
        {"language": "python", "total_games": 1, "average_score": 0.0},
        {"language": "typescript", "total_games": 2, "average_score": 2.0},
    ]


def test_analytics_reports_actual_counts(db_session):
    create_language(db_session, "typescript", snippet_count=1)
    player = create_user(db_session)
    easy = create_snippets(db_session, [True, True, True])
    create_snippets(db_session, [True, False], difficulty=Difficulty.HARD, volume=2)
    create_game(db_session, player, easy, [True, True, True])

    analytics = _service(db_session).analytics()

    (entry,) = analytics["languages"]
    assert entry["snippet_count"] == 5
    assert entry["stored_snippet_count"] == 1
    assert entry["difficulty_counts"] == {"easy": 3, "medium": 0, "hard": 2}
    assert analytics["total_games"] == 1
    assert analytics["difficulty_summary"] == {"easy": 1, "medium": 0, "hard": 0}
    assert analytics["volume_summary"] == {1: 1}
    assert analytics["level_summary"] == {1: 1}


def test_snippet_stats(db_session):
    create_language(db_session, "typescript")
    create_language(db_session, "python")
    create_snippets(db_session, [True, False, False])
    create_snippets(db_session, [True], language="python")

    stats = _service(db_session).snippet_stats()

    assert stats["total_snippets"] == 4
    by_language = {entry["language"]: entry for entry in stats["snippets_by_language"]}
    assert by_language["typescript"] == {"language": "typescript", "count": 3, "valid_count": 1, "invalid_count": 2}
    assert by_language["python"]["valid_count"] == 1

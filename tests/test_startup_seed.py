from merge_api.main import app, seed_defaults
from merge_api.models.settings.game_settings_model import GameSettings
from merge_api.models.snippet.language_volume_model import LanguageVolume
from merge_api.models.user.user_model import User, UserRole


def test_api_routes_are_mounted():
    assert app.url_path_for("start_game") == "/api/v1/games"
    assert app.url_path_for("submit_answer", game_id=7) == "/api/v1/games/7/answers"
    assert app.url_path_for("get_top_scores") == "/api/v1/scores/top"
    assert app.url_path_for("get_dashboard_stats") == "/api/v1/admin/dashboard"


def test_seed_defaults_is_idempotent(db_session, monkeypatch):
    from merge_api import main

    monkeypatch.setattr(main.settings, "DEFAULT_LANGUAGES", ["typescript", "Python"])
    monkeypatch.setattr(main.settings, "DEFAULT_ADMIN_EXTERNAL_ID", "admin-ext")
    monkeypatch.setattr(main.settings, "DEFAULT_ADMIN_NAME", "root")

    seed_defaults(db_session)
    seed_defaults(db_session)

    assert db_session.query(GameSettings).count() == 1
    assert sorted(volume.language for volume in db_session.query(LanguageVolume)) == ["python", "typescript"]
    admin = db_session.query(User).one()
    assert admin.role == UserRole.ADMIN
    assert admin.name == "root"


def test_seed_without_admin(db_session, monkeypatch):
    from merge_api import main

    monkeypatch.setattr(main.settings, "DEFAULT_LANGUAGES", [])
    monkeypatch.setattr(main.settings, "DEFAULT_ADMIN_EXTERNAL_ID", None)

    seed_defaults(db_session)

    assert db_session.query(User).count() == 0

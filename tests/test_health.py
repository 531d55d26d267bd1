"""Basic health check tests."""

from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from conftest import run


def test_import_elowen():
    """Test that elowen package can be imported."""
    import elowen
    assert elowen.__version__ == "1.0.0"


def test_import_core():
    from elowen.core import Period, ProfileStore, SkinType

    store = ProfileStore(display_name="Melissa")
    assert store.total_steps(Period.AM) == 0
    assert SkinType("Combination") == SkinType.COMBINATION


def test_settings_defaults(monkeypatch):
    from elowen.config import ElowenSettings

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    settings = ElowenSettings(_env_file=None)
    assert settings.is_development
    assert settings.coach_reply_delay == 1.2
    assert settings.timezone is None


def test_cli_version():
    from elowen.main import app

    result = CliRunner().invoke(app, ["version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.stdout


class TestScreens:
    """Interactive screens driven with scripted input."""

    def test_cancel_retake_returns_home(self, committed_store, mock_collaborator):
        from elowen.main import _onboarding
        from elowen.session import AppSession, View

        session = AppSession(committed_store, mock_collaborator, reply_delay=0)
        session.wizard.current_step_index = 1
        with patch("elowen.main._ask", AsyncMock(return_value="x")):
            run(_onboarding(session))

        assert session.view == View.HOME
        mock_collaborator.generate_routine.assert_not_awaited()

    def test_cancel_ignored_without_plan(self, session):
        from elowen.main import _onboarding
        from elowen.session import View

        with patch("elowen.main._ask", AsyncMock(return_value="x")):
            run(_onboarding(session))

        assert session.view == View.ONBOARDING

    def test_library_filters_by_topic(self, session, capsys):
        from elowen.main import _library

        with patch("elowen.main._ask", AsyncMock(return_value="physiology")):
            run(_library(session))

        out = capsys.readouterr().out
        assert "Dermal Barrier Integrity" in out
        assert "Retinoid Synergies" not in out

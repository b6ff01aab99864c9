from slack_harness.config import Settings
from slack_harness.services.harness import SlackHarness


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("SLACK_HARNESS_SIGNING_SECRET", "from-env")
    monkeypatch.setenv("SLACK_HARNESS_PORT", "5123")
    monkeypatch.setenv("SLACK_HARNESS_MODAL_WAIT_TIMEOUT", "0.5")

    settings = Settings(_env_file=None)

    assert settings.SIGNING_SECRET == "from-env"
    assert settings.PORT == 5123
    assert settings.MODAL_WAIT_TIMEOUT == 0.5


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("SLACK_HARNESS_EVENTS_URL", raising=False)
    monkeypatch.delenv("SLACK_HARNESS_API_PREFIX", raising=False)

    settings = Settings(_env_file=None)

    assert settings.EVENTS_URL.endswith("/slack/events")
    assert settings.API_PREFIX == "/api"


def test_response_url_falls_back_to_local_port():
    harness = SlackHarness(public_url=None, api_prefix="/mock")
    harness.port = 4321

    assert harness.response_url("C1", "1.5") == "http://localhost:4321/mock/response_url/C1/1.5"
    harness.close()


def test_set_team_applies_to_new_sessions():
    harness = SlackHarness(team_id="T1")
    harness.set_team("T2")

    assert harness.user("U1").user == {"id": "U1", "team_id": "T2"}
    assert harness.client.team_id == "T2"
    harness.close()

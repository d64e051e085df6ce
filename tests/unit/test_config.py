"""Unit tests for Settings env mapping."""

from repshield.config import Settings


def test_cors_origin_list_strips_blanks():
    s = Settings(CORS_ORIGINS=" http://a.test , ,http://b.test,")
    assert s.cors_origin_list == ["http://a.test", "http://b.test"]


def test_env_names_map_to_fields(monkeypatch):
    monkeypatch.setenv("ENFORCE_TRANSITION_GRAPH", "false")
    monkeypatch.setenv("TELEGRAM_ADMIN_CHAT_ID", "12345")
    s = Settings()
    assert s.enforce_transition_graph is False
    assert s.telegram_admin_chat_id == 12345


def test_providers_unconfigured_by_default(monkeypatch):
    for name in ("REDDIT_CLIENT_ID", "SCRAPINGBEE_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.reddit_client_id == ""
    assert s.scrapingbee_api_key == ""
    assert s.openai_api_key == ""

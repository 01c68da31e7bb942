import pytest

from todo_api import server
from todo_api.settings import ConfigurationError, get_settings

ENV_VARS = ["DATABASE_URL", "PORT", "HOST", "CORS_ALLOW_ORIGINS", "LOG_LEVEL", "SQL_ECHO"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_database_url_required(self):
        with pytest.raises(ConfigurationError):
            get_settings()

    def test_blank_database_url_rejected(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "   ")
        with pytest.raises(ConfigurationError):
            get_settings()

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        settings = get_settings()
        assert settings.database_url == "sqlite://"
        assert settings.port == 4000
        assert settings.host == "0.0.0.0"
        assert settings.cors_allow_origins == ["*"]
        assert settings.log_level == "INFO"
        assert settings.sql_echo is False

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/todos")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("SQL_ECHO", "yes")
        settings = get_settings()
        assert settings.port == 8080
        assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert settings.log_level == "DEBUG"
        assert settings.sql_echo is True

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_invalid_port(self, monkeypatch, port):
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        monkeypatch.setenv("PORT", port)
        with pytest.raises(ConfigurationError):
            get_settings()


class TestServerEntryPoint:
    def test_refuses_to_start_without_database_url(self, monkeypatch):
        monkeypatch.setattr(server, "load_dotenv", lambda: False)
        monkeypatch.setattr(server, "setup_logging", lambda *a, **kw: None)
        started = []
        monkeypatch.setattr(server.uvicorn, "run", lambda *a, **kw: started.append((a, kw)))
        assert server.main() == 1
        assert started == []

    def test_runs_uvicorn_on_configured_port(self, monkeypatch):
        monkeypatch.setattr(server, "load_dotenv", lambda: False)
        monkeypatch.setattr(server, "setup_logging", lambda *a, **kw: None)
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        monkeypatch.setenv("PORT", "5055")
        started = []
        monkeypatch.setattr(server.uvicorn, "run", lambda app, **kw: started.append(kw))
        assert server.main() == 0
        assert started[0]["port"] == 5055
        assert started[0]["host"] == "0.0.0.0"

from app.core.config import DEFAULT_CORS_ORIGINS
from app.core.config import Settings
from app.core.config import settings


def test_config_defaults():
    # Ensure default settings have expected types and default values
    assert settings.model_filename == "all-MiniLM-L6-v2-quant.tflite"
    assert settings.asset_dir == "assets"
    assert isinstance(settings.asset_fetch_timeout, float)
    assert settings.embedding_dimension == 384
    assert settings.preload_model is False


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("ASSET_BASE_URL", "https://cdn.example/web/")
    monkeypatch.setenv("INTERPRETER_THREADS", "4")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    custom = Settings()

    assert custom.asset_base_url == "https://cdn.example/web/"
    assert custom.interpreter_threads == 4
    assert custom.log_level == "DEBUG"


def test_cors_origins_from_string():
    custom = Settings(cors_allowed_origins="https://a.example, https://b.example")
    assert custom.cors_allowed_origins == ["https://a.example", "https://b.example"]


def test_cors_origins_default_when_empty():
    custom = Settings(cors_allowed_origins=None)
    assert custom.cors_allowed_origins == DEFAULT_CORS_ORIGINS

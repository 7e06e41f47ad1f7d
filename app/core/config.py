"""Application configuration settings.

This module defines the application-wide settings using Pydantic's BaseSettings.
It allows for loading configurations from environment variables and .env files,
providing type validation and default values.
"""

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

# Default list of CORS allowed origins
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "https://localhost:3000",
    "https://localhost:8000",
    "http://0.0.0.0:8000",  # Add this for local development with 0.0.0.0 host
]


class Settings(BaseSettings):
    """Manages application settings, loading them from environment variables or an .env file.

    Attributes:
        model_filename: File name of the quantized embedding model artifact.
        asset_base_url: Deployment base (origin + path, or a local directory) the
            model locations are derived from.
        asset_dir: Name of the assets segment used to build candidate locations.
        asset_fetch_timeout: Timeout in seconds for fetching the model over HTTP.
        embedding_dimension: Expected width of the embedding vector.
        interpreter_threads: Thread count handed to the interpreter; None keeps the runtime default.
        preload_model: Whether to load the model during application startup.
        api_key: API key for securing the embedding endpoints. Routes are open when unset.
        cors_allowed_origins: List of allowed origins for CORS.
        log_level: Level applied to the application loggers.
    """

    model_filename: str = Field(default="all-MiniLM-L6-v2-quant.tflite")
    asset_base_url: str = Field(default="http://localhost:8000/")
    asset_dir: str = Field(default="assets")
    asset_fetch_timeout: float = Field(default=30.0, description="Model fetch timeout in seconds.")

    embedding_dimension: int = Field(default=384)
    interpreter_threads: int | None = Field(default=None)
    preload_model: bool = Field(default=False)

    api_key: str | None = Field(default=None)

    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),  # Use a copy of the default list
    )

    log_level: str = Field(default="INFO")

    model_config = {
        "env_file": ".env",
        "protected_namespaces": ("settings_",),
        "env_prefix": "",  # No prefix for environment variables
        "extra": "ignore",  # Ignore extra fields
    }

    @field_validator("cors_allowed_origins", mode="before")  # type: ignore
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str] | None) -> list[str]:
        """Assembles the list of CORS allowed origins.

        If 'v' is a string, it splits it by commas. If 'v' is already a list,
        it's used directly. Otherwise, returns the default list of origins.

        Args:
            v: The value from the environment or direct assignment.

        Returns:
            A list of strings representing allowed CORS origins.
        """
        if isinstance(v, str) and v:
            return [origin.strip() for origin in v.split(",")]
        elif isinstance(v, list):
            return v
        return list(DEFAULT_CORS_ORIGINS)

    @field_validator("log_level", mode="before")  # type: ignore
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str:
        return (v or "INFO").upper()


settings = Settings()

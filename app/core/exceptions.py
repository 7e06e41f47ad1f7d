"""Core custom exceptions for the application."""


class EmbeddingError(Exception):
    """Base exception for embedding-model errors."""


class ConfigurationError(EmbeddingError):
    """Exception for configuration-related errors (e.g., malformed asset base URL)."""


class AssetFetchError(EmbeddingError):
    """Raised when a model asset cannot be fetched from a candidate location."""


class ModelFormatError(EmbeddingError):
    """Raised when the runtime rejects the fetched model bytes."""


class ModelNotLoadedError(EmbeddingError):
    """Raised when inference is requested before a model has been loaded."""


class InferenceError(EmbeddingError):
    """Raised when tensor construction, prediction or output extraction fails."""

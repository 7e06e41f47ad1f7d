"""Host-facing entry points for the embedding model.

``load_embedding_model`` never raises; ``vectorize_text`` surfaces failures to
the caller unchanged.
"""

import logging
from collections.abc import Sequence

from app.services.embedding_service import EmbeddingModelService

logger = logging.getLogger(__name__)

_service: EmbeddingModelService | None = None


def get_embedding_service() -> EmbeddingModelService:
    """Return the process-wide embedding service (created lazily)."""
    global _service
    if _service is None:
        _service = EmbeddingModelService()
    return _service


def reset_embedding_service(service: EmbeddingModelService | None = None) -> EmbeddingModelService:
    """Replace the process-wide service, e.g. after a settings change."""
    global _service
    _service = service or EmbeddingModelService()
    return _service


async def load_embedding_model(model_bytes: bytes | None = None) -> bool:
    """Loads the shared embedding model and reports success; never raises.

    Returns the loader's result, so False also covers a load already in
    progress and both model locations failing, not only an unexpected error.
    ``model_bytes`` is ignored.
    """
    try:
        return await get_embedding_service().load(model_bytes)
    except Exception:
        logger.exception("Embedding model load raised")
        return False


async def vectorize_text(
    input_ids: Sequence[float],
    attention_mask: Sequence[float],
    token_type_ids: Sequence[float],
    sequence_length: int,
) -> list[float]:
    """Embeds one tokenized sequence with the shared model.

    Raises:
        ModelNotLoadedError: If ``load_embedding_model`` has not succeeded yet.
        InferenceError: If the runtime fails during prediction.
    """
    return await get_embedding_service().infer(input_ids, attention_mask, token_type_ids, sequence_length)

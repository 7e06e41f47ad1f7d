import logging
from uuid import uuid4

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException

from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.core.exceptions import InferenceError
from app.core.exceptions import ModelNotLoadedError
from app.core.security import verify_api_key
from app.models.embedding_models import LoadResponse
from app.models.embedding_models import ModelStatus
from app.models.embedding_models import VectorizeRequest
from app.models.embedding_models import VectorizeResponse
from app.services.bridge import get_embedding_service
from app.services.embedding_service import EmbeddingModelService

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/embedding")


@router.post(
    "/load",
    dependencies=[Depends(verify_api_key)],
    summary="Load the embedding model",
    tags=["Embedding"],
)
async def load_model(
    service: EmbeddingModelService = Depends(get_embedding_service),
) -> LoadResponse:
    """Loads the model from the primary asset location, falling back to the secondary one.

    Always answers 200: ``loaded`` is false when another load is in progress
    or when both locations failed (``state`` tells the two apart).
    """
    try:
        loaded = await service.load()
    except Exception:
        logger.exception("Unexpected error while loading the embedding model")
        loaded = False
    return LoadResponse(loaded=loaded, state=service.state.value)


@router.post(
    "/vectorize",
    dependencies=[Depends(verify_api_key)],
    summary="Embed a tokenized sequence",
    tags=["Embedding"],
)
async def vectorize(
    payload: VectorizeRequest,
    service: EmbeddingModelService = Depends(get_embedding_service),
) -> VectorizeResponse:
    """Runs the model over one tokenized sequence and returns the raw output vector.

    Raises:
        HTTPException:
            - 403: Invalid API Key.
            - 422: The three arrays do not match ``sequence_length``.
            - 503: The model has not been loaded yet.
            - 500: The runtime failed during prediction.
    """
    request_id = str(uuid4())
    logger.info("[%s] /vectorize called, sequence_length=%d", request_id, payload.sequence_length)

    try:
        embedding = await service.infer(
            payload.input_ids,
            payload.attention_mask,
            payload.token_type_ids,
            payload.sequence_length,
        )
    except ModelNotLoadedError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except InferenceError as e:
        logger.error("[%s] Inference failed: %s", request_id, e)
        raise HTTPException(status_code=500, detail=f"Inference failed (trace: {request_id}).") from e

    return VectorizeResponse(embedding=embedding, dimension=len(embedding))


@router.get(
    "/status",
    dependencies=[Depends(verify_api_key)],
    summary="Embedding model status",
    tags=["Embedding"],
)
async def model_status(
    service: EmbeddingModelService = Depends(get_embedding_service),
) -> ModelStatus:
    """Reports the loader state. A misconfigured deployment base yields no locations and a ``last_error``."""
    last_error = service.last_error
    try:
        locations = service.candidate_locations()
    except ConfigurationError as e:
        logger.error("Cannot build model locations: %s", e)
        locations = []
        last_error = str(e)

    return ModelStatus(
        state=service.state.value,
        model_file=service.model_filename,
        locations=locations,
        embedding_dimension=settings.embedding_dimension,
        last_error=last_error,
    )

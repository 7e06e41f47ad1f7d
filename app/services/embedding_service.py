"""Embedding model lifecycle: two-location loading and single-sequence inference.

Load failures are reported as a boolean and logged; inference failures are
raised to the caller.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Sequence
from typing import Any
from uuid import uuid4

import numpy as np

from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.core.exceptions import InferenceError
from app.core.exceptions import ModelNotLoadedError
from app.core.runtime import load_tflite_model
from app.services.assets import build_asset_locations
from app.services.assets import fetch_asset

# Configure module logger
logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[bytes]]
ModelFactory = Callable[[bytes], Any]


class ModelState(str, enum.Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


def _default_model_factory(content: bytes) -> Any:
    return load_tflite_model(content, num_threads=settings.interpreter_threads)


class EmbeddingModelService:
    """Owns the embedding model handle and runs single-sequence inference.

    Lifecycle is ``UNLOADED -> LOADING -> LOADED``; a failed load goes back to
    ``UNLOADED``. Once loaded the model is kept for the lifetime of the service.
    """

    def __init__(
        self,
        base_url: str | None = None,
        model_filename: str | None = None,
        asset_dir: str | None = None,
        fetcher: Fetcher | None = None,
        model_factory: ModelFactory | None = None,
    ):
        self.base_url = base_url or settings.asset_base_url
        self.model_filename = model_filename or settings.model_filename
        self.asset_dir = asset_dir or settings.asset_dir
        self._fetch = fetcher or fetch_asset
        self._model_factory = model_factory or _default_model_factory

        self.model: Any | None = None
        self.last_error: str | None = None
        self._state = ModelState.UNLOADED

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state is ModelState.LOADING

    @property
    def model_ready(self) -> bool:
        return self.model is not None

    def candidate_locations(self) -> list[str]:
        return build_asset_locations(self.base_url, self.model_filename, self.asset_dir)

    async def _load_from(self, location: str) -> Any:
        content = await self._fetch(location)
        return await asyncio.to_thread(self._model_factory, content)

    async def load(self, model_bytes: bytes | None = None) -> bool:
        """Loads the model from the primary location, then the fallback one.

        ``model_bytes`` is accepted for host compatibility and ignored.

        Returns:
            True when the model is (or already was) loaded. False when another
            load is in flight or both locations failed.
        """
        if self.model is not None:
            return True
        if self._state is ModelState.LOADING:
            logger.info("Model load already in progress, rejecting concurrent request")
            return False

        # Must flip before the first await
        self._state = ModelState.LOADING
        try:
            try:
                primary, fallback = self.candidate_locations()
            except ConfigurationError as e:
                self.last_error = str(e)
                logger.error("Cannot build model locations: %s", e)
                return False

            try:
                logger.info("Trying primary model location: %s", primary)
                model = await self._load_from(primary)
                self._store(model)
                logger.info("Model loaded from %s", primary)
                return True
            except Exception as e:
                logger.warning("Primary model location failed: %s", e)

            try:
                logger.info("Trying fallback model location: %s", fallback)
                model = await self._load_from(fallback)
                self._store(model)
                logger.info("Model loaded from fallback %s", fallback)
                return True
            except Exception as e:
                self.last_error = str(e)
                logger.error("All model load attempts failed (last error: %s)", e)
                return False
        finally:
            if self._state is ModelState.LOADING:
                self._state = ModelState.UNLOADED

    def _store(self, model: Any) -> None:
        self.model = model
        self.last_error = None
        self._state = ModelState.LOADED

    async def infer(
        self,
        input_ids: Sequence[float],
        attention_mask: Sequence[float],
        token_type_ids: Sequence[float],
        sequence_length: int,
    ) -> list[float]:
        """Runs one forward pass over a single tokenized sequence.

        The three arrays are bound to the model as ``[ids, mask, types]``, each
        cast to int32 with shape ``[1, sequence_length]``. Only the first model
        output is read.

        Raises:
            ModelNotLoadedError: If no model has been loaded yet.
            InferenceError: If building inputs, predicting or reading the output fails.
        """
        model = self.model
        if model is None:
            raise ModelNotLoadedError("Model is not loaded.")

        request_id = str(uuid4())
        inputs: list[np.ndarray] = []
        outputs: Any = None
        try:
            shape = (1, sequence_length)
            for name, values in (
                ("input_ids", input_ids),
                ("attention_mask", attention_mask),
                ("token_type_ids", token_type_ids),
            ):
                if len(values) != sequence_length:
                    raise InferenceError(f"{name} has length {len(values)}, expected {sequence_length}")
                inputs.append(np.asarray(values).astype(np.int32).reshape(shape))

            logger.debug("[%s] Running inference with shape %s", request_id, shape)
            outputs = await asyncio.to_thread(model.predict, inputs)

            output = outputs[0] if isinstance(outputs, (list, tuple)) else outputs
            return np.asarray(output, dtype=np.float32).ravel().tolist()
        except InferenceError:
            logger.exception("[%s] Prediction error", request_id)
            raise
        except Exception as e:
            logger.exception("[%s] Prediction error", request_id)
            raise InferenceError(f"Prediction failed: {e}") from e
        finally:
            inputs.clear()
            del outputs

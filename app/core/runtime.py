"""LiteRT (TensorFlow Lite) interpreter wrapper used for the embedding model."""

import logging
import threading
from collections.abc import Sequence

import numpy as np
from ai_edge_litert.interpreter import Interpreter

from app.core.exceptions import ModelFormatError

logger = logging.getLogger(__name__)


class LiteRTModel:
    """A loaded .tflite model exposing a positional ``predict``.

    The interpreter owns its tensor arena, so outputs are copied out with
    ``get_tensor`` and nothing returned by ``predict`` points into it.
    """

    def __init__(self, interpreter: Interpreter):
        self._interpreter = interpreter
        self._lock = threading.Lock()
        self._input_details = interpreter.get_input_details()
        self._output_details = interpreter.get_output_details()

    @property
    def input_count(self) -> int:
        return len(self._input_details)

    @property
    def output_dimension(self) -> int | None:
        if not self._output_details:
            return None
        shape = self._output_details[0].get("shape")
        if shape is None or len(shape) == 0:
            return None
        return int(shape[-1])

    def _resize_if_needed(self, inputs: Sequence[np.ndarray]) -> None:
        resized = False
        for detail, array in zip(self._input_details, inputs):
            if tuple(detail["shape"]) != array.shape:
                self._interpreter.resize_tensor_input(detail["index"], list(array.shape))
                resized = True
        if resized:
            self._interpreter.allocate_tensors()
            self._input_details = self._interpreter.get_input_details()
            self._output_details = self._interpreter.get_output_details()

    def predict(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        """Runs one forward pass with ``inputs`` bound to the model inputs in order.

        Args:
            inputs: Arrays matching the model's declared inputs positionally.

        Returns:
            One owned array per model output, in output order.
        """
        if len(inputs) != self.input_count:
            raise ValueError(f"Model expects {self.input_count} inputs, got {len(inputs)}")

        with self._lock:
            self._resize_if_needed(inputs)
            for detail, array in zip(self._input_details, inputs):
                self._interpreter.set_tensor(detail["index"], array.astype(detail["dtype"], copy=False))
            self._interpreter.invoke()
            return [self._interpreter.get_tensor(detail["index"]) for detail in self._output_details]


def load_tflite_model(content: bytes, num_threads: int | None = None) -> LiteRTModel:
    """Builds a LiteRT interpreter from serialized model bytes.

    Raises:
        ModelFormatError: If the runtime cannot parse or allocate the model.
    """
    try:
        interpreter = Interpreter(model_content=content, num_threads=num_threads)
        interpreter.allocate_tensors()
    except (ValueError, RuntimeError) as e:
        raise ModelFormatError(f"Runtime rejected model ({len(content)} bytes): {e}") from e
    model = LiteRTModel(interpreter)
    logger.debug("Interpreter ready: %d inputs, output dimension %s", model.input_count, model.output_dimension)
    return model

import asyncio

import numpy as np
import pytest

from app.core.exceptions import AssetFetchError
from app.services.embedding_service import EmbeddingModelService

BASE_URL = "https://host.example/app/"
PRIMARY = BASE_URL + "assets/assets/all-MiniLM-L6-v2-quant.tflite"
FALLBACK = BASE_URL + "assets/all-MiniLM-L6-v2-quant.tflite"


class FakeModel:
    """Stands in for a loaded interpreter; records the inputs of every call."""

    def __init__(self, outputs=None, error: Exception | None = None):
        self.outputs = outputs if outputs is not None else [np.linspace(0.0, 1.0, 384, dtype=np.float32).reshape(1, 384)]
        self.error = error
        self.calls: list[list[np.ndarray]] = []
        self.last_inputs = None

    def predict(self, inputs):
        self.calls.append([np.array(a, copy=True) for a in inputs])
        self.last_inputs = inputs
        if self.error is not None:
            raise self.error
        return self.outputs


class FakeFetcher:
    """Serves canned bytes per location; unknown locations fail like a 404."""

    def __init__(self, payloads: dict[str, bytes] | None = None, gate: asyncio.Event | None = None):
        self.payloads = payloads or {}
        self.gate = gate
        self.calls: list[str] = []

    async def __call__(self, location: str) -> bytes:
        self.calls.append(location)
        if self.gate is not None:
            await self.gate.wait()
        if location not in self.payloads:
            raise AssetFetchError(f"HTTP 404 for {location}")
        return self.payloads[location]


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def make_service():
    def _make_service(payloads=None, model=None, gate=None, factory=None):
        fetcher = FakeFetcher(payloads, gate=gate)
        built = model or FakeModel()
        service = EmbeddingModelService(
            base_url=BASE_URL,
            model_filename="all-MiniLM-L6-v2-quant.tflite",
            asset_dir="assets",
            fetcher=fetcher,
            model_factory=factory or (lambda content: built),
        )
        return service, fetcher, built

    return _make_service


@pytest.fixture
def loaded_service(make_service):
    service, _fetcher, model = make_service()
    service._store(model)
    return service, model


@pytest.fixture
def make_model():
    return FakeModel


@pytest.fixture
def locations():
    return PRIMARY, FALLBACK

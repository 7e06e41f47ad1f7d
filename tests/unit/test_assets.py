import httpx
import pytest

from app.core.exceptions import AssetFetchError
from app.core.exceptions import ConfigurationError
from app.services.assets import build_asset_locations
from app.services.assets import fetch_asset


def test_build_asset_locations_url():
    assert build_asset_locations("https://host.example/app/", "model.tflite") == [
        "https://host.example/app/assets/assets/model.tflite",
        "https://host.example/app/assets/model.tflite",
    ]


def test_build_asset_locations_adds_trailing_slash():
    primary, fallback = build_asset_locations("https://host.example", "model.tflite", prefix="/static/")
    assert primary == "https://host.example/static/static/model.tflite"
    assert fallback == "https://host.example/static/model.tflite"


@pytest.mark.parametrize("base, filename", [("", "model.tflite"), ("https://host.example/", "")])
def test_build_asset_locations_rejects_empty(base, filename):
    with pytest.raises(ConfigurationError):
        build_asset_locations(base, filename)


@pytest.mark.asyncio
async def test_fetch_asset_http_success():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/assets/model.tflite"
        return httpx.Response(200, content=b"TFL3")

    content = await fetch_asset("https://host.example/assets/model.tflite", transport=httpx.MockTransport(handler))
    assert content == b"TFL3"


@pytest.mark.asyncio
async def test_fetch_asset_http_404():
    transport = httpx.MockTransport(lambda request: httpx.Response(404))

    with pytest.raises(AssetFetchError, match="HTTP 404"):
        await fetch_asset("https://host.example/assets/assets/model.tflite", transport=transport)


@pytest.mark.asyncio
async def test_fetch_asset_http_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(AssetFetchError, match="failed"):
        await fetch_asset("http://localhost:1/model.tflite", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_asset_empty_payload():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b""))

    with pytest.raises(AssetFetchError, match="Empty"):
        await fetch_asset("https://host.example/model.tflite", transport=transport)


@pytest.mark.asyncio
async def test_fetch_asset_local_file(tmp_path):
    model_file = tmp_path / "assets" / "model.tflite"
    model_file.parent.mkdir()
    model_file.write_bytes(b"TFL3")

    assert await fetch_asset(str(model_file)) == b"TFL3"
    assert await fetch_asset(model_file.as_uri()) == b"TFL3"


@pytest.mark.asyncio
async def test_fetch_asset_missing_file(tmp_path):
    with pytest.raises(AssetFetchError, match="Cannot read"):
        await fetch_asset(str(tmp_path / "missing.tflite"))


@pytest.mark.asyncio
async def test_local_fallback_directory_layout(tmp_path):
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "model.tflite").write_bytes(b"TFL3")
    primary, fallback = build_asset_locations(str(tmp_path), "model.tflite")

    with pytest.raises(AssetFetchError):
        await fetch_asset(primary)
    assert await fetch_asset(fallback) == b"TFL3"

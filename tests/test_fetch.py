import asyncio

import httpx
import pytest

from bpmn_inline.config import BuildConfig
from bpmn_inline.errors import FetchError
from bpmn_inline.fetch import fetch_vendor, planned_downloads


def serve(routes):
    requested = []

    def handler(request):
        requested.append(str(request.url))
        body = routes.get(str(request.url))
        if body is None:
            return httpx.Response(404)
        return httpx.Response(200, content=body)

    return handler, requested


def test_planned_urls(tmp_path):
    config = BuildConfig.default(tmp_path)
    urls = [d.url for d in planned_downloads(config, "1.2.3", "3.7.1")]
    assert urls[0] == "https://unpkg.com/bpmn-js@1.2.3/dist/bpmn-modeler.development.js"
    assert urls[1] == "https://code.jquery.com/jquery-3.7.1.min.js"
    assert "https://unpkg.com/bpmn-js@1.2.3/dist/assets/bpmn-font/font/bpmn.woff2" in urls
    assert len(urls) == 7


def test_fetch_writes_every_asset(tmp_path):
    config = BuildConfig.default(tmp_path)
    routes = {d.url: d.url.encode() for d in planned_downloads(config, "18.6.2", "3.7.1")}
    handler, requested = serve(routes)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_vendor(config, "18.6.2", "3.7.1", client=client)

    written = asyncio.run(run())
    assert len(written) == 7
    assert sorted(requested) == sorted(routes)
    jquery = tmp_path / "dist" / "jquery.js"
    assert jquery.read_bytes() == b"https://code.jquery.com/jquery-3.7.1.min.js"
    assert (tmp_path / "dist/assets/bpmn-font/font/bpmn.woff").is_file()


def test_failed_download_writes_nothing(tmp_path):
    config = BuildConfig.default(tmp_path)
    routes = {d.url: b"x" for d in planned_downloads(config, "18.6.2", "3.7.1")}
    del routes["https://code.jquery.com/jquery-3.7.1.min.js"]
    handler, _ = serve(routes)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_vendor(config, "18.6.2", "3.7.1", client=client)

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(run())
    assert "unexpected status 404" in str(excinfo.value)
    assert not (tmp_path / "dist").exists()


def test_transport_error_is_wrapped(tmp_path):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_vendor(BuildConfig.default(tmp_path), client=client)

    with pytest.raises(FetchError):
        asyncio.run(run())


def test_invalid_concurrency(tmp_path):
    with pytest.raises(ValueError):
        asyncio.run(fetch_vendor(BuildConfig.default(tmp_path), concurrency=0))

"""Download the vendor distribution files into the project tree."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import httpx

from bpmn_inline.compose import write_bytes
from bpmn_inline.config import BuildConfig
from bpmn_inline.errors import FetchError

DEFAULT_BPMN_VERSION = "18.6.2"
DEFAULT_JQUERY_VERSION = "3.7.1"


@dataclass
class Download:
    path: Path
    url: str
    content: bytes = b""


def planned_downloads(config: BuildConfig, bpmn_version: str, jquery_version: str) -> List[Download]:
    sources = [(s.path, s.source) for s in config.vendor_scripts]
    sources += [(s.path, s.source) for s in config.stylesheets]
    sources += [(v.path, v.source) for font in config.fonts for v in font.variants]
    downloads = []
    for path, source in sources:
        if source is None:
            continue
        url = source.format(bpmn_version=bpmn_version, jquery_version=jquery_version)
        downloads.append(Download(config.resolve(path), url))
    return downloads


async def fetch_one(client: httpx.AsyncClient, download: Download, gate: asyncio.Semaphore) -> Download:
    async with gate:
        try:
            response = await client.get(download.url)
        except httpx.HTTPError as exc:
            raise FetchError(f"GET {download.url}: {exc!r}") from exc
    if response.status_code != httpx.codes.OK:
        raise FetchError(f"GET {download.url}: unexpected status {response.status_code}")
    download.content = response.content
    return download


async def fetch_vendor(
    config: BuildConfig,
    bpmn_version: str = DEFAULT_BPMN_VERSION,
    jquery_version: str = DEFAULT_JQUERY_VERSION,
    concurrency: int = 4,
    timeout: float = 30.0,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Path]:
    """Fetch every asset that has a ``source`` URL.

    Nothing is written unless all downloads succeeded.
    """
    if concurrency <= 0:
        raise ValueError("concurrency must be > 0")
    if timeout <= 0:
        raise ValueError("timeout must be > 0")

    downloads = planned_downloads(config, bpmn_version, jquery_version)
    if not downloads:
        return []

    gate = asyncio.Semaphore(concurrency)
    if client is None:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=timeout),
            follow_redirects=True,
            limits=httpx.Limits(max_connections=concurrency, max_keepalive_connections=concurrency),
        ) as owned:
            done = await asyncio.gather(*(fetch_one(owned, d, gate) for d in downloads))
    else:
        done = await asyncio.gather(*(fetch_one(client, d, gate) for d in downloads))

    written = await asyncio.gather(*(asyncio.to_thread(write_bytes, d.path, d.content) for d in done))
    return list(written)

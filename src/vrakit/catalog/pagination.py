from __future__ import annotations

from typing import Any, AsyncIterator, Awaitable, Callable

from vrakit.catalog.models import Page, decode
from vrakit.clients.base import BaseHTTPClient

PageFetcher = Callable[[int], Awaitable[Page]]


async def fetch_page(client: BaseHTTPClient, path: str, number: int, *, size: int) -> Page:
    """Fetch page ``number`` (1-based) of the collection at ``path``."""
    response = await client.get(path, params={"page": number, "limit": size})
    return decode(Page, response.json_object(), what=f"page {number} of {path}")


async def iter_pages(fetch: PageFetcher) -> AsyncIterator[Page]:
    """Yield pages 1..totalPages in order.

    The page count is read once from page 1; page 1 itself is not fetched
    twice. A failed fetch propagates and ends the enumeration.
    """
    first = await fetch(1)
    yield first
    for number in range(2, first.metadata.total_pages + 1):
        yield await fetch(number)


async def iter_entries(fetch: PageFetcher) -> AsyncIterator[Any]:
    async for page in iter_pages(fetch):
        for entry in page.content:
            yield entry


async def collect_entries(fetch: PageFetcher) -> list[Any]:
    """Concatenate every page's content in server order."""
    return [entry async for entry in iter_entries(fetch)]

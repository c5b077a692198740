from __future__ import annotations

from contextlib import aclosing

import structlog

from vrakit.catalog import paths
from vrakit.catalog.models import BusinessGroup, CatalogItem, Page, RequestTemplate, decode
from vrakit.catalog.pagination import collect_entries, fetch_page, iter_entries
from vrakit.clients.base import BaseHTTPClient
from vrakit.core.errors import NotFoundError

DEFAULT_PAGE_SIZE = 20


class CatalogReader:
    """Reads the entitled catalog and resolves names to identifiers."""

    def __init__(
        self,
        client: BaseHTTPClient,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._client = client
        self._page_size = page_size
        self._log = logger or structlog.get_logger()

    async def _catalog_page(self, number: int) -> Page:
        return await fetch_page(
            self._client, paths.ENTITLED_CATALOG_ITEM_VIEWS, number, size=self._page_size
        )

    async def resolve_catalog_item_id_by_name(self, name: str) -> str:
        """Return the id of the first entitled item named exactly ``name``.

        Pages are scanned in ascending order and entries in server order, so
        the earliest match wins.

        Raises:
            NotFoundError: no page holds an item with that name
            TransportError: a page fetch failed; no partial result is used
        """
        async with aclosing(iter_entries(self._catalog_page)) as entries:
            async for entry in entries:
                if isinstance(entry, dict) and entry.get("name") == name:
                    item = decode(CatalogItem, entry, what="entitled catalog item")
                    self._log.info("catalog_item_resolved", name=name, catalog_item_id=item.id)
                    return item.id
        raise NotFoundError(f"Catalog item '{name}' not found", details={"name": name})

    async def list_catalog_items(self) -> list[CatalogItem]:
        entries = await collect_entries(self._catalog_page)
        return [decode(CatalogItem, entry, what="entitled catalog item") for entry in entries]

    async def get_catalog_item(self, catalog_item_id: str) -> CatalogItem:
        path = paths.build_path(paths.ENTITLED_CATALOG_ITEM, catalog_item_id=catalog_item_id)
        response = await self._client.get(path)
        return decode(CatalogItem, response.json_object(), what="catalog item")

    async def get_request_template(self, catalog_item_id: str) -> RequestTemplate:
        path = paths.build_path(paths.REQUEST_TEMPLATE, catalog_item_id=catalog_item_id)
        self._log.info("request_template_fetch", catalog_item_id=catalog_item_id)
        response = await self._client.get(path)
        return RequestTemplate(response.json_object())

    async def get_business_group_id(self, name: str, tenant: str) -> str:
        """Resolve a business group (subtenant) name within ``tenant``."""
        path = paths.build_path(paths.TENANT_SUBTENANTS, tenant=tenant)

        async def subtenant_page(number: int) -> Page:
            return await fetch_page(self._client, path, number, size=self._page_size)

        async with aclosing(iter_entries(subtenant_page)) as entries:
            async for entry in entries:
                if isinstance(entry, dict) and entry.get("name") == name:
                    group = decode(BusinessGroup, entry, what="business group")
                    self._log.info("business_group_resolved", name=name, business_group_id=group.id)
                    return group.id
        raise NotFoundError(
            f"No business group found with name '{name}'",
            details={"name": name, "tenant": tenant},
        )

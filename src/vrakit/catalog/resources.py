from __future__ import annotations

import structlog

from vrakit.catalog import paths
from vrakit.catalog.models import Page, Resource, decode
from vrakit.catalog.pagination import collect_entries, fetch_page
from vrakit.clients.base import BaseHTTPClient

DEFAULT_PAGE_SIZE = 20


class ResourceEnumerator:
    """Lists the resources provisioned by a request."""

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

    async def _collect(self, path: str, what: str) -> list[Resource]:
        async def resource_page(number: int) -> Page:
            return await fetch_page(self._client, path, number, size=self._page_size)

        entries = await collect_entries(resource_page)
        return [decode(Resource, entry, what=what) for entry in entries]

    async def list_resources_for_request(self, request_id: str) -> list[Resource]:
        """Every resource view of ``request_id``, all pages, in server order."""
        path = paths.build_path(paths.REQUEST_RESOURCE_VIEWS, request_id=request_id)
        resources = await self._collect(path, "resource view")
        self._log.info("request_resources_listed", request_id=request_id, count=len(resources))
        return resources

    async def list_request_resources(self, request_id: str) -> list[Resource]:
        """Full resource records of ``request_id``, all pages, in server order.

        Unlike the views these always carry ``parentResourceRef``.
        """
        path = paths.build_path(paths.REQUEST_RESOURCES, request_id=request_id)
        return await self._collect(path, "request resource")

    async def get_resource(self, resource_id: str) -> Resource:
        path = paths.build_path(paths.RESOURCE, resource_id=resource_id)
        response = await self._client.get(path)
        return decode(Resource, response.json_object(), what="resource")

    async def list_components(self, deployment: Resource) -> list[Resource]:
        """Child resources of a deployment, from its request's resource records.

        Only called on demand; enumeration never recurses by itself.
        """
        if not deployment.request_id:
            return []
        resources = await self.list_request_resources(deployment.request_id)
        return [r for r in resources if r.parent_resource_id == deployment.id]

from __future__ import annotations

import asyncio

import structlog

from vrakit.catalog import paths
from vrakit.catalog.models import Request, RequestState, RequestTemplate, decode
from vrakit.clients.base import BaseHTTPClient
from vrakit.core.errors import PollTimeoutError, SerializationError


class RequestSubmitter:
    """Submits populated catalog item request templates."""

    def __init__(
        self,
        client: BaseHTTPClient,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._client = client
        self._log = logger or structlog.get_logger()

    async def submit(self, template: RequestTemplate) -> Request:
        """Post ``template`` to its catalog item and return the new request.

        Raises:
            SerializationError: the template has no catalog item id, cannot be
                encoded, or the response is not a request
            TransportError: network failure or non-2xx response
        """
        catalog_item_id = template.catalog_item_id
        if not catalog_item_id:
            raise SerializationError("Request template has no catalogItemId")

        path = paths.build_path(paths.CATALOG_ITEM_REQUESTS, catalog_item_id=catalog_item_id)
        response = await self._client.post(path, json=template.to_payload())
        request = decode(Request, response.json_object(), what="catalog request")
        self._log.info(
            "request_submitted",
            catalog_item_id=catalog_item_id,
            request_id=request.id,
            state=request.raw_state,
        )
        return request


class RequestPoller:
    """Reads request status and waits for a terminal state."""

    def __init__(
        self,
        client: BaseHTTPClient,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._client = client
        self._log = logger or structlog.get_logger()

    async def get_request(self, request_id: str) -> Request:
        path = paths.build_path(paths.REQUEST, request_id=request_id)
        response = await self._client.get(path)
        return decode(Request, response.json_object(), what="request status")

    async def poll_until_terminal(
        self,
        request_id: str,
        poll_interval: float,
        timeout: float | None,
    ) -> Request:
        """Query ``request_id`` until it is SUCCESSFUL or FAILED.

        At least one status query is always made. Between non-terminal reads
        the coroutine sleeps ``poll_interval`` seconds, never past the
        deadline; a read made at or after the deadline that is still
        non-terminal raises PollTimeoutError. ``timeout=None`` means no
        ceiling. Transport errors are raised from the failing query without
        retry; cancel the awaiting task to stop early.
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        log = self._log.bind(request_id=request_id)
        last_state: RequestState | None = None
        attempts = 0

        while True:
            request = await self.get_request(request_id)
            attempts += 1
            if request.state != last_state:
                log.info(
                    "request_state_changed",
                    previous=last_state.value if last_state else None,
                    state=request.raw_state,
                )
                last_state = request.state

            if request.is_terminal:
                log.info("request_terminal", state=request.raw_state, attempts=attempts)
                return request

            if deadline is None:
                delay = poll_interval
            else:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise PollTimeoutError(
                        f"Request {request_id} still {request.raw_state} after {timeout}s",
                        details={"request_id": request_id, "state": request.raw_state},
                    )
                delay = min(poll_interval, remaining)
            await asyncio.sleep(delay)

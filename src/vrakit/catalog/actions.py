from __future__ import annotations

import structlog

from vrakit.catalog import paths
from vrakit.catalog.models import Action, ActionTemplate, decode
from vrakit.clients.base import BaseHTTPClient
from vrakit.core.errors import ActionSubmissionError, NotFoundError, SerializationError

RECONFIGURE = "Reconfigure"
DESTROY = "Destroy"
SCALE_OUT = "Scale Out"
SCALE_IN = "Scale In"
DEPLOYMENT_DESTROY = "Deployment Destroy"

DESTROY_ACTIONS = frozenset({DESTROY, DEPLOYMENT_DESTROY})


class ActionCatalog:
    """Lists the actions permitted on a resource. Results are never cached."""

    def __init__(
        self,
        client: BaseHTTPClient,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._client = client
        self._log = logger or structlog.get_logger()

    async def list_actions(self, resource_id: str) -> list[Action]:
        """Decode every entry of the resource's action collection.

        One undecodable entry fails the whole call with SerializationError.
        """
        path = paths.build_path(paths.RESOURCE_ACTIONS, resource_id=resource_id)
        response = await self._client.get(path)
        content = response.json_object().get("content")
        if not isinstance(content, list):
            raise SerializationError(
                "Action collection has no content list",
                details={"resource_id": resource_id},
            )

        actions: list[Action] = []
        for index, entry in enumerate(content):
            if not isinstance(entry, dict):
                raise SerializationError(
                    "Action entry is not an object",
                    details={"resource_id": resource_id, "index": index},
                )
            actions.append(
                decode(Action, {**entry, "resourceId": resource_id}, what=f"action {index}")
            )
        return actions

    async def find_action(self, resource_id: str, name: str) -> Action:
        for action in await self.list_actions(resource_id):
            if action.name == name:
                return action
        raise NotFoundError(
            f"Action '{name}' is not available on resource {resource_id}",
            details={"resource_id": resource_id, "action": name},
        )


class ActionTemplateEngine:
    """Fetches and submits action input templates."""

    def __init__(
        self,
        client: BaseHTTPClient,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._client = client
        self._log = logger or structlog.get_logger()

    async def fetch_action_template(self, resource_id: str, action_id: str) -> ActionTemplate:
        path = paths.build_path(
            paths.RESOURCE_ACTION_TEMPLATE, resource_id=resource_id, action_id=action_id
        )
        self._log.info("action_template_fetch", resource_id=resource_id, action_id=action_id)
        response = await self._client.get(path)
        return ActionTemplate(response.json_object(), resource_id=resource_id, action_id=action_id)

    async def submit_action(
        self,
        resource_id: str,
        action_id: str,
        template: ActionTemplate,
    ) -> str:
        """Post a filled template and return the follow-up request id.

        The service must answer 201 with a Location whose last path segment
        is the new request id. The follow-up request is not polled here.

        Raises:
            ActionSubmissionError: the template belongs to another
                resource/action pair, or the response breaks the contract
            TransportError: network failure or non-2xx response
        """
        if not template.is_bound_to(resource_id, action_id):
            raise ActionSubmissionError(
                "Action template was fetched for a different resource/action",
                details={
                    "resource_id": resource_id,
                    "action_id": action_id,
                    "template_resource_id": template.resource_id,
                    "template_action_id": template.action_id,
                },
            )

        path = paths.build_path(
            paths.RESOURCE_ACTION_REQUESTS, resource_id=resource_id, action_id=action_id
        )
        response = await self._client.post(path, json=template.to_payload())
        if response.status_code != 201:
            raise ActionSubmissionError(
                f"Expected 201 Created, got {response.status_code}",
                details={"resource_id": resource_id, "action_id": action_id},
            )

        request_id = paths.request_id_from_location(response.location)
        if request_id is None:
            raise ActionSubmissionError(
                "Response location does not reference a request",
                details={"location": response.location or ""},
            )
        self._log.info(
            "action_submitted",
            resource_id=resource_id,
            action_id=action_id,
            request_id=request_id,
        )
        return request_id

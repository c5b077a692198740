"""
Provision and act on catalog deployments.

The engine components each do one exchange; this module is the caller that
chains them: resolve, template, submit, poll and enumerate for a new
deployment, and find, template, submit, poll and refresh for an action.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog

from vrakit.catalog.actions import DESTROY_ACTIONS, ActionCatalog, ActionTemplateEngine
from vrakit.catalog.models import Request, RequestState, RequestTemplate
from vrakit.catalog.reader import CatalogReader
from vrakit.catalog.requests import RequestPoller, RequestSubmitter
from vrakit.catalog.resources import ResourceEnumerator
from vrakit.clients.base import BaseHTTPClient
from vrakit.config.settings import Settings
from vrakit.core.errors import ConfigurationError, RequestFailedError
from vrakit.workflows.results import ActionResult, ProvisionResult

logger = structlog.get_logger()


@dataclass(slots=True)
class DeploymentWorkflow:
    client: BaseHTTPClient
    page_size: int = 20
    poll_interval: float = 10.0
    poll_timeout: float | None = 3600.0
    tenant: str | None = None
    catalog: CatalogReader = field(init=False)
    submitter: RequestSubmitter = field(init=False)
    poller: RequestPoller = field(init=False)
    resources: ResourceEnumerator = field(init=False)
    actions: ActionCatalog = field(init=False)
    templates: ActionTemplateEngine = field(init=False)

    def __post_init__(self) -> None:
        self.catalog = CatalogReader(self.client, page_size=self.page_size)
        self.submitter = RequestSubmitter(self.client)
        self.poller = RequestPoller(self.client)
        self.resources = ResourceEnumerator(self.client, page_size=self.page_size)
        self.actions = ActionCatalog(self.client)
        self.templates = ActionTemplateEngine(self.client)

    @classmethod
    def from_settings(cls, client: BaseHTTPClient, settings: Settings) -> "DeploymentWorkflow":
        return cls(
            client,
            page_size=settings.page_size,
            poll_interval=settings.poll_interval,
            poll_timeout=settings.poll_timeout,
            tenant=settings.tenant,
        )

    async def wait(self, request_id: str) -> Request:
        """Poll ``request_id`` to completion, raising if it failed."""
        request = await self.poller.poll_until_terminal(
            request_id, self.poll_interval, self.poll_timeout
        )
        if request.state == RequestState.failed:
            raise RequestFailedError(
                f"Request {request_id} finished as {request.raw_state}",
                details={"request_id": request_id, "reason": request.reason or ""},
            )
        return request

    async def provision(
        self,
        catalog_item: str,
        fields: Mapping[str, Any] | None = None,
        *,
        by_id: bool = False,
        business_group: str | None = None,
        template: Mapping[str, Any] | None = None,
        wait: bool = True,
    ) -> ProvisionResult:
        """Request ``catalog_item`` and, when ``wait``, collect its resources.

        ``template`` replaces the server's request template as the starting
        document; ``fields`` are dotted-path assignments applied on top.
        """
        if business_group and not self.tenant:
            raise ConfigurationError("A tenant is required to resolve a business group")

        if by_id:
            catalog_item_id = catalog_item
        else:
            catalog_item_id = await self.catalog.resolve_catalog_item_id_by_name(catalog_item)

        if template is not None:
            request_template = RequestTemplate(template)
        else:
            request_template = await self.catalog.get_request_template(catalog_item_id)
        request_template.catalog_item_id = catalog_item_id

        if business_group:
            request_template.business_group_id = await self.catalog.get_business_group_id(
                business_group, self.tenant
            )
        request_template.update(fields or {})

        request = await self.submitter.submit(request_template)
        log = logger.bind(request_id=request.id, catalog_item_id=catalog_item_id)
        if not wait:
            log.info("provision_submitted")
            return ProvisionResult(catalog_item_id=catalog_item_id, request=request)

        request = await self.wait(request.id)
        resources = await self.resources.list_resources_for_request(request.id)
        log.info("provision_completed", resources=len(resources))
        return ProvisionResult(catalog_item_id=catalog_item_id, request=request, resources=resources)

    async def run_action(
        self,
        resource_id: str,
        action_name: str,
        fields: Mapping[str, Any] | None = None,
        *,
        wait: bool = True,
    ) -> ActionResult:
        """Run the action named ``action_name`` on ``resource_id``.

        After a successful non-destroy action the resource is re-read so the
        result carries its updated properties.
        """
        action = await self.actions.find_action(resource_id, action_name)
        action_template = await self.templates.fetch_action_template(resource_id, action.id)
        action_template.update(fields or {})
        request_id = await self.templates.submit_action(resource_id, action.id, action_template)

        result = ActionResult(resource_id=resource_id, action_name=action_name, request_id=request_id)
        if not wait:
            return result

        result.request = await self.wait(request_id)
        if action_name not in DESTROY_ACTIONS:
            result.resource = await self.resources.get_resource(resource_id)
        logger.info(
            "action_completed",
            resource_id=resource_id,
            action=action_name,
            request_id=request_id,
        )
        return result

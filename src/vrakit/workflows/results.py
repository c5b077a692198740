"""Result types for provisioning workflows."""

from __future__ import annotations

from dataclasses import dataclass, field

from vrakit.catalog.models import Request, RequestState, Resource


@dataclass
class ProvisionResult:
    """Outcome of a catalog item request."""

    catalog_item_id: str
    request: Request
    resources: list[Resource] = field(default_factory=list)

    @property
    def request_id(self) -> str:
        return self.request.id

    @property
    def deployment(self) -> Resource | None:
        """The deployment root, if the request produced one."""
        return next((r for r in self.resources if r.is_deployment), None)

    @property
    def completed(self) -> bool:
        return self.request.state == RequestState.successful


@dataclass
class ActionResult:
    """Outcome of a resource action submission."""

    resource_id: str
    action_name: str
    request_id: str
    request: Request | None = None
    resource: Resource | None = None

    @property
    def completed(self) -> bool:
        return self.request is not None and self.request.state == RequestState.successful

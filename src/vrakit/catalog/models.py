"""
Typed views over consumer API payloads.

Only the fields the engine reads are declared and validated; every other key
is kept as a pydantic extra so nothing the server sends is lost. Templates are
not modelled at all: they stay plain documents wrapped by ``Template``.
"""

from __future__ import annotations

import copy
from enum import StrEnum
from typing import Any, ClassVar, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from vrakit.core.errors import SerializationError
from vrakit.templates import get_field, set_field

DEPLOYMENT_RESOURCE_TYPE = "composition.resource.type.deployment"
VIRTUAL_MACHINE_RESOURCE_TYPE = "Infrastructure.Virtual"


class RequestState(StrEnum):
    """Lifecycle of a catalog or action request."""

    submitted = "SUBMITTED"
    in_progress = "IN_PROGRESS"
    successful = "SUCCESSFUL"
    failed = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (RequestState.successful, RequestState.failed)


# Remote states folded onto the four lifecycle states.
_STATE_ALIASES: dict[str, RequestState] = {
    "UNSUBMITTED": RequestState.submitted,
    "PENDING_PRE_APPROVAL": RequestState.in_progress,
    "PENDING_POST_APPROVAL": RequestState.in_progress,
    "PARTIALLY_SUCCESSFUL": RequestState.failed,
    "REJECTED": RequestState.failed,
}


def normalise_state(raw: str) -> RequestState:
    try:
        return RequestState(raw)
    except ValueError:
        pass
    if raw in _STATE_ALIASES:
        return _STATE_ALIASES[raw]
    raise ValueError(f"Unknown request state: {raw!r}")


class VraModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


M = TypeVar("M", bound=BaseModel)


def decode(model: type[M], payload: Any, *, what: str) -> M:
    """Validate ``payload`` into ``model`` or raise SerializationError."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise SerializationError(
            f"Could not decode {what}",
            details={"errors": exc.error_count(), "first_error": exc.errors()[0]["msg"]},
        ) from exc


class PageMetadata(VraModel):
    size: int = 0
    total_elements: int = Field(0, alias="totalElements")
    total_pages: int = Field(alias="totalPages", ge=0)
    number: int = 1
    offset: int = 0


class Page(VraModel):
    """One page of a consumer API collection."""

    content: list[Any] = Field(default_factory=list)
    metadata: PageMetadata


class CatalogItem(VraModel):
    id: str
    name: str
    tenant: str | None = None
    business_group_id: str | None = Field(None, alias="businessGroupId")

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        organization: Any = None
        if isinstance(data.get("catalogItem"), dict):
            # single item endpoint wraps the item in an envelope
            data = {**data, **data["catalogItem"]}
            organization = data.get("organization")
        if data.get("catalogItemId"):
            data["id"] = data["catalogItemId"]
            orgs = data.get("entitledOrganizations") or []
            organization = orgs[0] if orgs else None
        if isinstance(organization, dict):
            data.setdefault("tenant", organization.get("tenantRef"))
            data.setdefault("businessGroupId", organization.get("subtenantRef"))
        return data


class BusinessGroup(VraModel):
    id: str
    name: str


class Request(VraModel):
    """Remote request as last observed. Never written locally."""

    id: str
    state: RequestState
    raw_state: str = Field(alias="rawState")
    phase: str | None = None
    reasons: str | None = None
    completion_details: str | None = Field(None, alias="completionDetails")

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        raw = data.get("state")
        if isinstance(raw, str):
            data["rawState"] = raw
            data["state"] = normalise_state(raw)
        completion = data.get("requestCompletion")
        if isinstance(completion, dict) and "completionDetails" not in data:
            data["completionDetails"] = completion.get("completionDetails")
        return data

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def reason(self) -> str | None:
        return self.completion_details or self.reasons


def _literal(value: Any) -> Any:
    if not isinstance(value, dict) or "type" not in value:
        return value
    kind = value.get("type")
    if kind == "complex":
        return entries_to_dict((value.get("values") or {}).get("entries") or [])
    if kind == "multiple":
        return [_literal(item) for item in value.get("items") or []]
    return value.get("value")


def entries_to_dict(entries: list[Any]) -> dict[str, Any]:
    """Flatten ``[{"key": k, "value": {"type": t, "value": v}}]`` into ``{k: v}``."""
    result: dict[str, Any] = {}
    for entry in entries:
        if isinstance(entry, dict) and "key" in entry:
            result[entry["key"]] = _literal(entry.get("value"))
    return result


class Resource(VraModel):
    id: str
    name: str | None = None
    resource_type: str | None = Field(None, alias="resourceType")
    request_id: str | None = Field(None, alias="requestId")
    parent_resource_id: str | None = Field(None, alias="parentResourceId")
    properties: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("resourceId"):
            data["id"] = data["resourceId"]
        type_ref = data.get("resourceTypeRef")
        if isinstance(type_ref, dict) and not data.get("resourceType"):
            data["resourceType"] = type_ref.get("id")
        parent_ref = data.get("parentResourceRef")
        if isinstance(parent_ref, dict) and not data.get("parentResourceId"):
            data["parentResourceId"] = parent_ref.get("id")
        if "properties" not in data:
            resource_data = data.get("resourceData")
            if isinstance(resource_data, dict):
                data["properties"] = entries_to_dict(resource_data.get("entries") or [])
            elif isinstance(data.get("data"), dict):
                data["properties"] = data["data"]
        return data

    @property
    def is_deployment(self) -> bool:
        return self.resource_type == DEPLOYMENT_RESOURCE_TYPE

    @property
    def is_virtual_machine(self) -> bool:
        return self.resource_type == VIRTUAL_MACHINE_RESOURCE_TYPE


class Action(VraModel):
    """A lifecycle operation currently permitted on a resource."""

    id: str
    name: str
    description: str | None = None
    resource_id: str | None = Field(None, alias="resourceId")


class Template:
    """A dynamically shaped input document.

    The engine only reads and writes ``id_field``; the rest of the document
    is passed through untouched.
    """

    id_field: ClassVar[str] = ""

    def __init__(self, document: Mapping[str, Any]) -> None:
        self.document: dict[str, Any] = copy.deepcopy(dict(document))

    def get(self, path: str, default: Any = None) -> Any:
        return get_field(self.document, path, default)

    def set(self, path: str, value: Any) -> None:
        set_field(self.document, path, value)

    def update(self, fields: Mapping[str, Any]) -> None:
        """Assign each ``dotted.path: value`` pair in order."""
        for path, value in fields.items():
            set_field(self.document, path, value)

    def to_payload(self) -> dict[str, Any]:
        return copy.deepcopy(self.document)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return type(self) is type(other) and self.document == other.document

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.document.get(self.id_field)!r})"


class RequestTemplate(Template):
    id_field = "catalogItemId"

    @property
    def catalog_item_id(self) -> str | None:
        return self.document.get("catalogItemId")

    @catalog_item_id.setter
    def catalog_item_id(self, value: str) -> None:
        self.document["catalogItemId"] = value

    @property
    def business_group_id(self) -> str | None:
        return self.document.get("businessGroupId")

    @business_group_id.setter
    def business_group_id(self, value: str) -> None:
        self.document["businessGroupId"] = value


class ActionTemplate(Template):
    """Action input bound to the (resource, action) pair it was fetched for."""

    id_field = "actionId"

    def __init__(self, document: Mapping[str, Any], *, resource_id: str, action_id: str) -> None:
        super().__init__(document)
        self.resource_id = resource_id
        self.action_id = action_id

    def is_bound_to(self, resource_id: str, action_id: str) -> bool:
        return (self.resource_id, self.action_id) == (resource_id, action_id)

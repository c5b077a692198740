"""Row and JSON shapes for CLI output."""

from __future__ import annotations

from typing import Any

from vrakit.catalog.models import Action, CatalogItem, Request, Resource


def catalog_item_row(item: CatalogItem) -> list[str]:
    return [item.id, item.name, item.business_group_id or ""]


def request_summary(request: Request) -> dict[str, Any]:
    return {
        "id": request.id,
        "state": request.raw_state,
        "phase": request.phase,
        "reason": request.reason,
    }


def resource_summary(resource: Resource) -> dict[str, Any]:
    return {
        "id": resource.id,
        "name": resource.name,
        "type": resource.resource_type,
        "request_id": resource.request_id,
        "parent_resource_id": resource.parent_resource_id,
        "properties": resource.properties,
    }


def resource_row(resource: Resource) -> list[str]:
    return [
        resource.id,
        resource.name or "",
        resource.resource_type or "",
        resource.parent_resource_id or "",
    ]


def action_row(action: Action) -> list[str]:
    return [action.id, action.name, action.description or ""]

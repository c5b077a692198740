"""Tests for catalog/resources.py resource enumeration."""

import pytest
import respx
from httpx import Response
from vrakit.catalog.models import DEPLOYMENT_RESOURCE_TYPE, VIRTUAL_MACHINE_RESOURCE_TYPE, Resource
from vrakit.catalog.resources import ResourceEnumerator
from vrakit.core.errors import SerializationError, TransportError


def _view(resource_id, resource_type=VIRTUAL_MACHINE_RESOURCE_TYPE, parent=None, request_id="req-1"):
    view = {
        "@type": "CatalogResourceView",
        "resourceId": resource_id,
        "name": f"name-{resource_id}",
        "resourceType": resource_type,
        "requestId": request_id,
        "data": {},
    }
    if parent:
        view["parentResourceId"] = parent
    return view


@pytest.fixture
def views_url(consumer_url):
    return f"{consumer_url}/requests/req-1/resourceViews"


@pytest.mark.asyncio
async def test_lists_all_pages_in_order(client, views_url, mock_pages):
    with respx.mock:
        routes = mock_pages(
            views_url,
            [
                [_view("dep-1", DEPLOYMENT_RESOURCE_TYPE), _view("vm-1", parent="dep-1")],
                [_view("vm-2", parent="dep-1")],
                [_view("vm-3", parent="dep-1"), _view("vm-4", parent="dep-1")],
            ],
        )

        resources = await ResourceEnumerator(client).list_resources_for_request("req-1")

        assert [r.call_count for r in routes] == [1, 1, 1]

    assert [r.id for r in resources] == ["dep-1", "vm-1", "vm-2", "vm-3", "vm-4"]
    assert resources[0].is_deployment


@pytest.mark.asyncio
async def test_single_page_listing(client, views_url, mock_pages):
    with respx.mock:
        mock_pages(views_url, [[_view("dep-1", DEPLOYMENT_RESOURCE_TYPE)]])

        resources = await ResourceEnumerator(client).list_resources_for_request("req-1")

    assert len(resources) == 1


@pytest.mark.asyncio
async def test_page_failure_is_raised(client, views_url, page_body):
    with respx.mock:
        respx.get(views_url, params={"page": "1"}).mock(
            return_value=Response(200, json=page_body([_view("dep-1")], 2))
        )
        respx.get(views_url, params={"page": "2"}).mock(return_value=Response(404))

        with pytest.raises(TransportError):
            await ResourceEnumerator(client).list_resources_for_request("req-1")


@pytest.mark.asyncio
async def test_undecodable_entry_fails_listing(client, views_url, mock_pages):
    with respx.mock:
        mock_pages(views_url, [[_view("dep-1"), {"name": "no id"}]])

        with pytest.raises(SerializationError):
            await ResourceEnumerator(client).list_resources_for_request("req-1")


@pytest.mark.asyncio
async def test_get_resource(client, consumer_url):
    with respx.mock:
        respx.get(f"{consumer_url}/resources/vm-1").mock(
            return_value=Response(
                200,
                json={
                    "@type": "CatalogResource",
                    "id": "vm-1",
                    "name": "vm-001",
                    "resourceTypeRef": {"id": VIRTUAL_MACHINE_RESOURCE_TYPE},
                    "requestId": "req-1",
                    "parentResourceRef": {"id": "dep-1"},
                    "resourceData": {
                        "entries": [{"key": "MachineMemory", "value": {"type": "integer", "value": 4096}}]
                    },
                },
            )
        )

        resource = await ResourceEnumerator(client).get_resource("vm-1")

    assert resource.is_virtual_machine
    assert resource.parent_resource_id == "dep-1"
    assert resource.properties["MachineMemory"] == 4096


def _record(resource_id, resource_type=VIRTUAL_MACHINE_RESOURCE_TYPE, parent=None):
    return {
        "@type": "CatalogResource",
        "id": resource_id,
        "name": f"name-{resource_id}",
        "resourceTypeRef": {"id": resource_type, "label": resource_type},
        "requestId": "req-1",
        "parentResourceRef": {"id": parent, "label": parent} if parent else None,
    }


@pytest.mark.asyncio
async def test_list_request_resources_reads_parent_refs(client, consumer_url, mock_pages):
    with respx.mock:
        mock_pages(
            f"{consumer_url}/requests/req-1/resources",
            [[_record("dep-1", DEPLOYMENT_RESOURCE_TYPE)], [_record("vm-1", parent="dep-1")]],
        )

        resources = await ResourceEnumerator(client).list_request_resources("req-1")

    assert [(r.id, r.parent_resource_id) for r in resources] == [("dep-1", None), ("vm-1", "dep-1")]
    assert resources[0].is_deployment


@pytest.mark.asyncio
async def test_list_components_filters_by_parent(client, consumer_url, mock_pages):
    deployment = Resource.model_validate(_view("dep-1", DEPLOYMENT_RESOURCE_TYPE))

    with respx.mock:
        mock_pages(
            f"{consumer_url}/requests/req-1/resources",
            [
                [
                    _record("dep-1", DEPLOYMENT_RESOURCE_TYPE),
                    _record("vm-1", parent="dep-1"),
                    _record("vm-9", parent="dep-other"),
                    _record("vm-2", parent="dep-1"),
                ]
            ],
        )

        components = await ResourceEnumerator(client).list_components(deployment)

    assert [c.id for c in components] == ["vm-1", "vm-2"]


@pytest.mark.asyncio
async def test_list_components_without_request_id(client):
    deployment = Resource.model_validate({"id": "dep-1", "resourceType": DEPLOYMENT_RESOURCE_TYPE})

    assert await ResourceEnumerator(client).list_components(deployment) == []

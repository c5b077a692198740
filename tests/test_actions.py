"""Tests for catalog/actions.py action listing and template submission."""

import json

import pytest
import respx
from httpx import Response
from vrakit.catalog.actions import ActionCatalog, ActionTemplateEngine
from vrakit.catalog.models import ActionTemplate
from vrakit.core.errors import ActionSubmissionError, NotFoundError, SerializationError

ACTION_TEMPLATE = {
    "type": "com.vmware.vcac.catalog.domain.request.CatalogResourceRequest",
    "resourceId": "res-1",
    "actionId": "act-reconf",
    "description": None,
    "data": {"cpu": 1, "memory": 1024, "reasons": None},
}


def _action(action_id, name):
    return {
        "@type": "ConsumerResourceOperation",
        "id": action_id,
        "name": name,
        "description": f"{name} the resource",
        "type": "ACTION",
        "bindingId": f"Infrastructure.Machine.Action.{name}",
    }


@pytest.fixture
def actions_url(consumer_url):
    return f"{consumer_url}/resources/res-1/actions"


class TestActionCatalog:
    @pytest.mark.asyncio
    async def test_list_actions(self, client, actions_url):
        with respx.mock:
            respx.get(actions_url).mock(
                return_value=Response(
                    200,
                    json={
                        "content": [_action("act-reconf", "Reconfigure"), _action("act-destroy", "Destroy")],
                        "metadata": {"totalPages": 1},
                    },
                )
            )

            actions = await ActionCatalog(client).list_actions("res-1")

        assert [(a.id, a.name) for a in actions] == [
            ("act-reconf", "Reconfigure"),
            ("act-destroy", "Destroy"),
        ]
        assert all(a.resource_id == "res-1" for a in actions)

    @pytest.mark.asyncio
    async def test_one_bad_entry_fails_the_call(self, client, actions_url):
        with respx.mock:
            respx.get(actions_url).mock(
                return_value=Response(
                    200,
                    json={"content": [_action("act-reconf", "Reconfigure"), {"name": "No id"}]},
                )
            )

            with pytest.raises(SerializationError):
                await ActionCatalog(client).list_actions("res-1")

    @pytest.mark.asyncio
    async def test_non_object_entry_fails_the_call(self, client, actions_url):
        with respx.mock:
            respx.get(actions_url).mock(return_value=Response(200, json={"content": ["Destroy"]}))

            with pytest.raises(SerializationError):
                await ActionCatalog(client).list_actions("res-1")

    @pytest.mark.asyncio
    async def test_missing_content(self, client, actions_url):
        with respx.mock:
            respx.get(actions_url).mock(return_value=Response(200, json={"links": []}))

            with pytest.raises(SerializationError):
                await ActionCatalog(client).list_actions("res-1")

    @pytest.mark.asyncio
    async def test_actions_are_fetched_fresh(self, client, actions_url):
        with respx.mock:
            route = respx.get(actions_url)
            route.side_effect = [
                Response(200, json={"content": [_action("act-reconf", "Reconfigure")]}),
                Response(200, json={"content": [_action("act-destroy", "Destroy")]}),
            ]
            catalog = ActionCatalog(client)

            first = await catalog.list_actions("res-1")
            second = await catalog.list_actions("res-1")

        assert [a.name for a in first] == ["Reconfigure"]
        assert [a.name for a in second] == ["Destroy"]

    @pytest.mark.asyncio
    async def test_find_action(self, client, actions_url):
        with respx.mock:
            respx.get(actions_url).mock(
                return_value=Response(200, json={"content": [_action("act-destroy", "Destroy")]})
            )
            catalog = ActionCatalog(client)

            assert (await catalog.find_action("res-1", "Destroy")).id == "act-destroy"
            with pytest.raises(NotFoundError):
                await catalog.find_action("res-1", "Scale Out")


class TestActionTemplateEngine:
    @pytest.mark.asyncio
    async def test_fetch_template(self, client, actions_url):
        with respx.mock:
            respx.get(f"{actions_url}/act-reconf/requests/template").mock(
                return_value=Response(200, json=ACTION_TEMPLATE)
            )

            template = await ActionTemplateEngine(client).fetch_action_template("res-1", "act-reconf")

        assert template.is_bound_to("res-1", "act-reconf")
        assert template.to_payload() == ACTION_TEMPLATE

    @pytest.mark.asyncio
    async def test_unmodified_round_trip(self, client, actions_url, consumer_url):
        with respx.mock:
            respx.get(f"{actions_url}/act-reconf/requests/template").mock(
                return_value=Response(200, json=ACTION_TEMPLATE)
            )
            post = respx.post(f"{actions_url}/act-reconf/requests").mock(
                return_value=Response(
                    201, headers={"Location": f"{consumer_url}/requests/abc-123"}
                )
            )
            engine = ActionTemplateEngine(client)

            template = await engine.fetch_action_template("res-1", "act-reconf")
            request_id = await engine.submit_action("res-1", "act-reconf", template)

            assert json.loads(post.calls.last.request.content) == ACTION_TEMPLATE

        assert request_id == "abc-123"

    @pytest.mark.asyncio
    async def test_populated_fields_are_submitted(self, client, actions_url, consumer_url):
        template = ActionTemplate(ACTION_TEMPLATE, resource_id="res-1", action_id="act-reconf")
        template.set("data.cpu", 4)

        with respx.mock:
            post = respx.post(f"{actions_url}/act-reconf/requests").mock(
                return_value=Response(201, headers={"Location": f"{consumer_url}/requests/r-5"})
            )

            await ActionTemplateEngine(client).submit_action("res-1", "act-reconf", template)

            body = json.loads(post.calls.last.request.content)

        assert body["data"]["cpu"] == 4
        assert body["data"]["memory"] == 1024

    @pytest.mark.asyncio
    async def test_status_200_is_rejected(self, client, actions_url, consumer_url):
        template = ActionTemplate(ACTION_TEMPLATE, resource_id="res-1", action_id="act-reconf")

        with respx.mock:
            respx.post(f"{actions_url}/act-reconf/requests").mock(
                return_value=Response(200, headers={"Location": f"{consumer_url}/requests/r-5"})
            )

            with pytest.raises(ActionSubmissionError, match="Expected 201"):
                await ActionTemplateEngine(client).submit_action("res-1", "act-reconf", template)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("headers", [{}, {"Location": "abc-123"}, {"Location": "https://vra/requests/"}])
    async def test_unusable_location_is_rejected(self, client, actions_url, headers):
        template = ActionTemplate(ACTION_TEMPLATE, resource_id="res-1", action_id="act-reconf")

        with respx.mock:
            respx.post(f"{actions_url}/act-reconf/requests").mock(
                return_value=Response(201, headers=headers)
            )

            with pytest.raises(ActionSubmissionError):
                await ActionTemplateEngine(client).submit_action("res-1", "act-reconf", template)

    @pytest.mark.asyncio
    async def test_template_for_another_pair_is_not_sent(self, client, consumer_url):
        template = ActionTemplate(ACTION_TEMPLATE, resource_id="res-1", action_id="act-reconf")

        with respx.mock(assert_all_called=False) as respx_mock:
            post = respx_mock.post(f"{consumer_url}/resources/res-2/actions/act-reconf/requests").mock(
                return_value=Response(201, headers={"Location": "/requests/x"})
            )

            with pytest.raises(ActionSubmissionError):
                await ActionTemplateEngine(client).submit_action("res-2", "act-reconf", template)

            assert post.call_count == 0

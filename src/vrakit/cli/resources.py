"""
CLI commands for provisioned resources.

Commands:
    vrakit resources list <request-id>          - Resources created by a request
    vrakit resources show <resource-id>         - One resource with its properties
    vrakit resources components <resource-id>   - Components of a deployment
"""

from __future__ import annotations

import asyncio

from vrakit.catalog.models import Resource
from vrakit.cli.context import build_workflow
from vrakit.cli.formatters import resource_row, resource_summary
from vrakit.cli.ux import print_json, print_key_value, print_table, warning
from vrakit.core.errors import ExitCode, main_with_error_handling

RESOURCE_COLUMNS = ["ID", "Name", "Type", "Parent"]


def _print_resources(title: str, resources: list[Resource], output_format: str) -> None:
    if output_format == "json":
        print_json([resource_summary(r) for r in resources])
    else:
        print_table(title, RESOURCE_COLUMNS, [resource_row(r) for r in resources])


@main_with_error_handling()
def resources_list_command(request_id: str, output_format: str = "table") -> int:
    workflow = build_workflow()
    resources = asyncio.run(workflow.resources.list_resources_for_request(request_id))
    _print_resources(f"Resources of request {request_id}", resources, output_format)
    return ExitCode.SUCCESS


@main_with_error_handling()
def resources_show_command(resource_id: str, output_format: str = "table") -> int:
    workflow = build_workflow()
    resource = asyncio.run(workflow.resources.get_resource(resource_id))

    if output_format == "json":
        print_json(resource_summary(resource))
        return ExitCode.SUCCESS

    summary = resource_summary(resource)
    properties = summary.pop("properties")
    print_key_value(summary, title=f"Resource {resource_id}")
    if properties:
        print_key_value(properties, title="Properties")
    return ExitCode.SUCCESS


@main_with_error_handling()
def resources_components_command(resource_id: str, output_format: str = "table") -> int:
    workflow = build_workflow()

    async def _components() -> tuple[Resource, list[Resource]]:
        deployment = await workflow.resources.get_resource(resource_id)
        return deployment, await workflow.resources.list_components(deployment)

    deployment, components = asyncio.run(_components())
    if not deployment.is_deployment and output_format != "json":
        warning(f"{resource_id} is a {deployment.resource_type}, not a deployment")
    _print_resources(f"Components of {deployment.name or resource_id}", components, output_format)
    return ExitCode.SUCCESS

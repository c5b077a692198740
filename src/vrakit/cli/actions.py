"""
CLI commands for resource actions.

Commands:
    vrakit actions list <resource-id>                        - Permitted actions
    vrakit actions template <resource-id> <action>           - Print an action's input template
    vrakit actions run <resource-id> <action> [--set P=V]... - Submit an action
"""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from vrakit.cli.context import build_workflow
from vrakit.cli.formatters import action_row, request_summary, resource_summary
from vrakit.cli.ux import print_json, print_table, spinner, success
from vrakit.core.errors import ExitCode, main_with_error_handling
from vrakit.templates import parse_assignments


@main_with_error_handling()
def actions_list_command(resource_id: str, output_format: str = "table") -> int:
    workflow = build_workflow()
    actions = asyncio.run(workflow.actions.list_actions(resource_id))

    if output_format == "json":
        print_json([{"id": a.id, "name": a.name, "description": a.description} for a in actions])
    else:
        print_table(
            f"Actions on {resource_id}",
            ["ID", "Name", "Description"],
            [action_row(a) for a in actions],
        )
    return ExitCode.SUCCESS


@main_with_error_handling()
def actions_template_command(resource_id: str, action_name: str) -> int:
    workflow = build_workflow()

    async def _fetch() -> dict:
        action = await workflow.actions.find_action(resource_id, action_name)
        template = await workflow.templates.fetch_action_template(resource_id, action.id)
        return template.to_payload()

    print_json(asyncio.run(_fetch()))
    return ExitCode.SUCCESS


@main_with_error_handling()
def actions_run_command(
    resource_id: str,
    action_name: str,
    assignments: Optional[Sequence[str]] = None,
    wait: bool = True,
    output_format: str = "table",
) -> int:
    """
    Run a named action (Reconfigure, Destroy, Scale Out, ...) on a resource.

    Exit codes:
        0 - Submitted (or completed, when waiting)
        1 - The follow-up request finished as FAILED
    """
    fields = parse_assignments(assignments)
    workflow = build_workflow()

    with spinner(f"Running {action_name} on {resource_id}..."):
        result = asyncio.run(workflow.run_action(resource_id, action_name, fields, wait=wait))

    if output_format == "json":
        print_json(
            {
                "resource_id": result.resource_id,
                "action": result.action_name,
                "request_id": result.request_id,
                "request": request_summary(result.request) if result.request else None,
                "resource": resource_summary(result.resource) if result.resource else None,
            }
        )
    elif result.request is None:
        success(f"{action_name} submitted as request {result.request_id}")
    else:
        success(f"{action_name} completed (request {result.request_id})")
    return ExitCode.SUCCESS

"""
CLI commands for catalog requests.

Commands:
    vrakit request submit <item> [--set PATH=VALUE]...  - Request a catalog item
    vrakit request status <id>                          - Show a request's state
    vrakit request wait <id>                            - Block until the request finishes
"""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from vrakit.catalog.models import RequestState
from vrakit.cli.context import build_workflow
from vrakit.cli.formatters import request_summary, resource_row, resource_summary
from vrakit.cli.ux import error, print_json, print_key_value, print_table, spinner, success
from vrakit.core.errors import ExitCode, main_with_error_handling
from vrakit.templates import load_template_file, parse_assignments


@main_with_error_handling()
def request_submit_command(
    catalog_item: str,
    by_id: bool = False,
    template_file: Optional[str] = None,
    assignments: Optional[Sequence[str]] = None,
    business_group: Optional[str] = None,
    wait: bool = True,
    output_format: str = "table",
) -> int:
    """
    Submit a catalog item request.

    The request template is fetched from the service unless ``template_file``
    is given. ``assignments`` (``PATH=VALUE``) are applied on top.

    Exit codes:
        0 - Submitted (or completed, when waiting)
        1 - The request finished as FAILED
    """
    fields = parse_assignments(assignments)
    template = load_template_file(template_file) if template_file else None
    workflow = build_workflow()

    with spinner(f"Requesting {catalog_item}..."):
        result = asyncio.run(
            workflow.provision(
                catalog_item,
                fields,
                by_id=by_id,
                business_group=business_group,
                template=template,
                wait=wait,
            )
        )

    if output_format == "json":
        print_json(
            {
                "catalog_item_id": result.catalog_item_id,
                "request": request_summary(result.request),
                "resources": [resource_summary(r) for r in result.resources],
            }
        )
        return ExitCode.SUCCESS

    if not wait:
        success(f"Request {result.request_id} submitted ({result.request.raw_state})")
        return ExitCode.SUCCESS

    success(f"Request {result.request_id} completed")
    print_table(
        "Provisioned resources",
        ["ID", "Name", "Type", "Parent"],
        [resource_row(r) for r in result.resources],
    )
    return ExitCode.SUCCESS


@main_with_error_handling()
def request_status_command(request_id: str, output_format: str = "table") -> int:
    workflow = build_workflow()
    request = asyncio.run(workflow.poller.get_request(request_id))

    if output_format == "json":
        print_json(request_summary(request))
    else:
        print_key_value(request_summary(request), title=f"Request {request_id}")
    return ExitCode.SUCCESS


@main_with_error_handling()
def request_wait_command(
    request_id: str,
    interval: Optional[float] = None,
    timeout: Optional[float] = None,
    output_format: str = "table",
) -> int:
    """
    Poll a request until it is SUCCESSFUL or FAILED.

    Exit codes:
        0 - SUCCESSFUL
        1 - FAILED
        14 - Still running when the timeout passed
    """
    workflow = build_workflow()
    poll_interval = workflow.poll_interval if interval is None else interval
    poll_timeout = workflow.poll_timeout if timeout is None else timeout

    with spinner(f"Waiting for request {request_id}..."):
        request = asyncio.run(
            workflow.poller.poll_until_terminal(request_id, poll_interval, poll_timeout)
        )

    if output_format == "json":
        print_json(request_summary(request))
    elif request.state == RequestState.successful:
        success(f"Request {request_id} {request.raw_state}")
    else:
        error(f"Request {request_id} {request.raw_state}: {request.reason or 'no reason given'}")

    if request.state == RequestState.failed:
        return ExitCode.REQUEST_FAILED
    return ExitCode.SUCCESS

"""
CLI commands for the entitled catalog.

Commands:
    vrakit catalog list                 - List entitled catalog items
    vrakit catalog resolve <name>       - Print the id of a catalog item
    vrakit catalog template <item>      - Print a catalog item's request template
"""

from __future__ import annotations

import asyncio

from vrakit.cli.context import build_workflow
from vrakit.cli.formatters import catalog_item_row
from vrakit.cli.ux import console, print_json, print_table
from vrakit.core.errors import ExitCode, main_with_error_handling


@main_with_error_handling()
def catalog_list_command(output_format: str = "table") -> int:
    workflow = build_workflow()
    items = asyncio.run(workflow.catalog.list_catalog_items())

    if output_format == "json":
        print_json([item.model_dump(mode="json") for item in items])
    else:
        print_table(
            "Entitled catalog items",
            ["ID", "Name", "Business group"],
            [catalog_item_row(item) for item in items],
        )
    return ExitCode.SUCCESS


@main_with_error_handling()
def catalog_resolve_command(name: str) -> int:
    workflow = build_workflow()
    catalog_item_id = asyncio.run(workflow.catalog.resolve_catalog_item_id_by_name(name))
    console.print(catalog_item_id, markup=False, highlight=False)
    return ExitCode.SUCCESS


@main_with_error_handling()
def catalog_template_command(catalog_item: str, by_id: bool = False) -> int:
    workflow = build_workflow()

    async def _fetch() -> dict:
        catalog_item_id = (
            catalog_item
            if by_id
            else await workflow.catalog.resolve_catalog_item_id_by_name(catalog_item)
        )
        template = await workflow.catalog.get_request_template(catalog_item_id)
        return template.to_payload()

    print_json(asyncio.run(_fetch()))
    return ExitCode.SUCCESS

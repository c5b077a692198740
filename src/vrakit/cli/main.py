from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from vrakit import __version__
from vrakit.config.settings import get_settings
from vrakit.core.errors import main_with_error_handling
from vrakit.logging import configure_logging


def _add_output(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--output", choices=["table", "json"], default="table", help="Output format")


def _add_assignments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        metavar="PATH=VALUE",
        help="Set a template field by dotted path (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vrakit", description="Catalog request and action CLI")
    parser.add_argument("--version", action="version", version=f"vrakit {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log to stderr (-vv for debug)")
    subparsers = parser.add_subparsers(dest="command")

    # catalog
    catalog_parser = subparsers.add_parser("catalog", help="Entitled catalog items")
    catalog_sub = catalog_parser.add_subparsers(dest="catalog_command")
    catalog_list = catalog_sub.add_parser("list", help="List entitled catalog items")
    _add_output(catalog_list)
    catalog_resolve = catalog_sub.add_parser("resolve", help="Print a catalog item id by name")
    catalog_resolve.add_argument("name", help="Exact catalog item name")
    catalog_template = catalog_sub.add_parser("template", help="Print a request template")
    catalog_template.add_argument("catalog_item", help="Catalog item name (or id with --id)")
    catalog_template.add_argument("--id", dest="by_id", action="store_true", help="Treat the item as an id")

    # request
    request_parser = subparsers.add_parser("request", help="Catalog requests")
    request_sub = request_parser.add_subparsers(dest="request_command")
    submit = request_sub.add_parser("submit", help="Request a catalog item")
    submit.add_argument("catalog_item", help="Catalog item name (or id with --id)")
    submit.add_argument("--id", dest="by_id", action="store_true", help="Treat the item as an id")
    submit.add_argument("--template", dest="template_file", help="YAML or JSON request template")
    submit.add_argument("--business-group", help="Business group name to request under")
    submit.add_argument("--no-wait", dest="wait", action="store_false", help="Return after submission")
    _add_assignments(submit)
    _add_output(submit)
    status = request_sub.add_parser("status", help="Show a request's state")
    status.add_argument("request_id")
    _add_output(status)
    wait = request_sub.add_parser("wait", help="Wait for a request to finish")
    wait.add_argument("request_id")
    wait.add_argument("--interval", type=float, help="Seconds between status checks")
    wait.add_argument("--timeout", type=float, help="Give up after this many seconds")
    _add_output(wait)

    # resources
    resources_parser = subparsers.add_parser("resources", help="Provisioned resources")
    resources_sub = resources_parser.add_subparsers(dest="resources_command")
    res_list = resources_sub.add_parser("list", help="Resources created by a request")
    res_list.add_argument("request_id")
    _add_output(res_list)
    res_show = resources_sub.add_parser("show", help="Show one resource")
    res_show.add_argument("resource_id")
    _add_output(res_show)
    res_components = resources_sub.add_parser("components", help="Components of a deployment")
    res_components.add_argument("resource_id")
    _add_output(res_components)

    # actions
    actions_parser = subparsers.add_parser("actions", help="Resource actions")
    actions_sub = actions_parser.add_subparsers(dest="actions_command")
    act_list = actions_sub.add_parser("list", help="Actions permitted on a resource")
    act_list.add_argument("resource_id")
    _add_output(act_list)
    act_template = actions_sub.add_parser("template", help="Print an action's input template")
    act_template.add_argument("resource_id")
    act_template.add_argument("action", help="Action name, e.g. Reconfigure")
    act_run = actions_sub.add_parser("run", help="Run an action on a resource")
    act_run.add_argument("resource_id")
    act_run.add_argument("action", help="Action name, e.g. Destroy")
    act_run.add_argument("--no-wait", dest="wait", action="store_false", help="Return after submission")
    _add_assignments(act_run)
    _add_output(act_run)

    return parser


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        configure_logging(logging.DEBUG, json_logs=False)
    elif verbose == 1:
        configure_logging(logging.INFO, json_logs=False)
    else:
        configure_logging(get_settings().log_level.upper())


def dispatch(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.command == "catalog":
        from vrakit.cli.catalog import (
            catalog_list_command,
            catalog_resolve_command,
            catalog_template_command,
        )

        if args.catalog_command == "list":
            return catalog_list_command(output_format=args.output)
        if args.catalog_command == "resolve":
            return catalog_resolve_command(args.name)
        if args.catalog_command == "template":
            return catalog_template_command(args.catalog_item, by_id=args.by_id)

    if args.command == "request":
        from vrakit.cli.requests import (
            request_status_command,
            request_submit_command,
            request_wait_command,
        )

        if args.request_command == "submit":
            return request_submit_command(
                args.catalog_item,
                by_id=args.by_id,
                template_file=args.template_file,
                assignments=args.assignments,
                business_group=args.business_group,
                wait=args.wait,
                output_format=args.output,
            )
        if args.request_command == "status":
            return request_status_command(args.request_id, output_format=args.output)
        if args.request_command == "wait":
            return request_wait_command(
                args.request_id,
                interval=args.interval,
                timeout=args.timeout,
                output_format=args.output,
            )

    if args.command == "resources":
        from vrakit.cli.resources import (
            resources_components_command,
            resources_list_command,
            resources_show_command,
        )

        if args.resources_command == "list":
            return resources_list_command(args.request_id, output_format=args.output)
        if args.resources_command == "show":
            return resources_show_command(args.resource_id, output_format=args.output)
        if args.resources_command == "components":
            return resources_components_command(args.resource_id, output_format=args.output)

    if args.command == "actions":
        from vrakit.cli.actions import (
            actions_list_command,
            actions_run_command,
            actions_template_command,
        )

        if args.actions_command == "list":
            return actions_list_command(args.resource_id, output_format=args.output)
        if args.actions_command == "template":
            return actions_template_command(args.resource_id, args.action)
        if args.actions_command == "run":
            return actions_run_command(
                args.resource_id,
                args.action,
                assignments=args.assignments,
                wait=args.wait,
                output_format=args.output,
            )

    parser.print_help()
    return 2


@main_with_error_handling()
def run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    _configure_logging(args.verbose)
    return dispatch(args, parser)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(run(args, parser))


if __name__ == "__main__":
    main()

"""CLI entrypoint for nistview."""

import argparse
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict

from nistview.api.export import render_json
from nistview.catalog.models import ExportFormat, ExportScope, ImpactLevel, Priority, QueryPredicates
from nistview.config.loader import (
    get_catalog_settings,
    get_export_settings,
    get_logging_settings,
    load_config,
)
from nistview.output.console import (
    render_control_detail,
    render_families,
    render_no_results,
    render_stats,
    render_table,
)
from nistview.output.sinks import DirectorySink, StreamSink
from nistview.retrieval.errors import LoadError
from nistview.retrieval.fetcher import CatalogFetcher
from nistview.retrieval.store import RecordStore
from nistview.utils.logging import configure_logging, get_logger
from nistview.view.controller import ViewController

logger = get_logger(__name__)

LOAD_ERROR_HINT = "Error: Failed to load NIST controls. Check your network connection and try again."


def _load_cli_config(args: argparse.Namespace) -> Dict[str, Any]:
    return load_config(args.config) if args.config else load_config()


def build_controller(config: Dict[str, Any], offline: bool = False) -> ViewController:
    """Construct store and controller from resolved configuration."""
    catalog_settings = get_catalog_settings(config)
    fallback_path = catalog_settings.get("fallback_path")
    fetcher = None if offline else CatalogFetcher(catalog_settings)
    store = RecordStore(
        fetcher,
        fallback_path=Path(fallback_path) if fallback_path else None,
        offline=offline,
    )
    return ViewController(store)


def _load_controller(args: argparse.Namespace) -> ViewController:
    controller = build_controller(args.config_data, offline=args.offline)
    try:
        controller.load()
    except LoadError:
        logger.error(controller.error)
        print(LOAD_ERROR_HINT)
        sys.exit(1)
    return controller


def _predicates_from_args(args: argparse.Namespace) -> QueryPredicates:
    return QueryPredicates(
        text=args.search or "",
        family=args.family or None,
        baseline=ImpactLevel(args.baseline) if args.baseline else None,
        priority=Priority(args.priority) if args.priority else None,
    )


def cmd_families(args: argparse.Namespace) -> None:
    """List control families present in the catalog."""
    controller = _load_controller(args)
    counts = Counter(c.family for c in controller.controls if c.family)
    print(render_families(controller.families, counts))


def cmd_list(args: argparse.Namespace) -> None:
    """List controls matching the given search and filters."""
    controller = _load_controller(args)
    view = controller.apply(_predicates_from_args(args))

    if args.format == "json":
        print(render_json(view))
    elif controller.is_empty_view:
        print(render_no_results(len(controller.controls), controller.predicates))
    else:
        print(render_table(view, len(controller.controls), controller.predicates))


def cmd_show(args: argparse.Namespace) -> None:
    """Show every field of a single control."""
    controller = _load_controller(args)
    control = controller.store.get_control(args.control_id)
    if control is None:
        # ids are conventionally upper case (AC-2); accept ac-2 too
        control = controller.store.get_control(args.control_id.upper())
    if control is None:
        print(f"Error: Control '{args.control_id}' not found")
        sys.exit(1)
    print(render_control_detail(control))


def cmd_stats(args: argparse.Namespace) -> None:
    """Print catalog statistics for the current view."""
    controller = _load_controller(args)
    controller.apply(_predicates_from_args(args))
    print(render_stats(controller.stats()))


def cmd_export(args: argparse.Namespace) -> None:
    """Export the full catalog or the filtered view."""
    controller = _load_controller(args)
    controller.apply(_predicates_from_args(args))

    if args.stdout:
        sink = StreamSink()
    else:
        out_dir = args.out_dir or Path(get_export_settings(args.config_data)["out_dir"])
        sink = DirectorySink(out_dir)

    message = controller.export(args.scope, args.format, sink)

    if not args.stdout:
        print(message)


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--search",
        type=str,
        help="Case-insensitive free-text search",
    )
    parser.add_argument(
        "--family",
        type=str,
        help='Exact family name, e.g. "Access Control"',
    )
    parser.add_argument(
        "--baseline",
        type=str,
        choices=[level.value for level in ImpactLevel],
        help="Only controls in this baseline",
    )
    parser.add_argument(
        "--priority",
        type=str,
        choices=[p.value for p in Priority],
        help="Only controls with this priority",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nistview",
        description="Browse, search and export the NIST SP 800-53 control catalog",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: nistview.config.yaml if present)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the remote fetch and use the embedded catalog",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # families command
    families_parser = subparsers.add_parser("families", help="List control families")
    families_parser.set_defaults(func=cmd_families)

    # list command
    list_parser = subparsers.add_parser("list", help="List controls")
    _add_filter_arguments(list_parser)
    list_parser.add_argument(
        "--format",
        type=str,
        choices=["table", "json"],
        default="table",
        help="Output format: table or json (default: table)",
    )
    list_parser.set_defaults(func=cmd_list)

    # show command
    show_parser = subparsers.add_parser("show", help="Show one control in detail")
    show_parser.add_argument("control_id", type=str, help="Control id, e.g. AC-2")
    show_parser.set_defaults(func=cmd_show)

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Show catalog statistics")
    _add_filter_arguments(stats_parser)
    stats_parser.set_defaults(func=cmd_stats)

    # export command
    export_parser = subparsers.add_parser("export", help="Export controls to JSON, CSV or Markdown")
    _add_filter_arguments(export_parser)
    export_parser.add_argument(
        "--scope",
        type=str,
        choices=[s.value for s in ExportScope],
        default=ExportScope.CURRENT_VIEW.value,
        help="all = full catalog, filtered = current search/filter view (default: filtered)",
    )
    export_parser.add_argument(
        "--format",
        type=str,
        choices=[f.value for f in ExportFormat],
        default=ExportFormat.JSON.value,
        help="Export format (default: json)",
    )
    destination = export_parser.add_mutually_exclusive_group()
    destination.add_argument(
        "--out-dir",
        type=Path,
        help="Directory to write the export file into (default: export.out_dir from config)",
    )
    destination.add_argument(
        "--stdout",
        action="store_true",
        help="Print the export to stdout instead of writing a file",
    )
    export_parser.set_defaults(func=cmd_export)

    return parser


def main(argv=None) -> None:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    try:
        args.config_data = _load_cli_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(2)

    configure_logging(args.log_level or get_logging_settings(args.config_data)["level"])

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()

"""Command line interface for the type change application."""

import argparse
import json
import logging
import sys
from typing import Optional

from .errors import ChangeTypeError
from .models.reference import Reference
from .models.content import ContentType
from .models.migration import MigrationConfig, MigrationRequest, parse_mapping_json
from .repository.management_api import ManagementAPIRepository
from .services.compatibility import mapping_choices
from .services.type_listing import find_type
from .orchestrator import ChangeTypeOrchestrator

logger = logging.getLogger(__name__)


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Change Type - Move a content item to another content type"
    )
    parser.add_argument("--config", help="Path to JSON config file (default: KONTENT_* env vars)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # List types
    types_parser = subparsers.add_parser("types", help="List the item's type and the other types")
    types_parser.add_argument("--item", required=True, help="Item codename")
    types_parser.add_argument("--target", help="Show mapping choices for this type (id or codename)")

    # Change type
    change_parser = subparsers.add_parser("change-type", help="Move an item to another type")
    change_parser.add_argument("--item", required=True, help="Item codename")
    change_parser.add_argument("--type", required=True, dest="type_id", help="Target type id")
    change_parser.add_argument(
        "--mapping", required=True,
        help="Path to JSON file mapping target element ids to source element ids"
    )
    change_parser.add_argument("--language", help="Language codename (default: project default)")

    # Serve API
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if args.command == "serve":
        return run_server(args)
    if args.command not in ("types", "change-type"):
        parser.print_help()
        return 1

    config = MigrationConfig.from_json_file(args.config) if args.config else MigrationConfig.from_env()
    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Configuration error: {error}", file=sys.stderr)
        return 1

    orchestrator = ChangeTypeOrchestrator(ManagementAPIRepository(config), config)

    try:
        if args.command == "types":
            run_types(orchestrator, args)
        else:
            run_change_type(orchestrator, args)
    except ChangeTypeError as e:
        print(json.dumps({"error": e.to_dict()}, indent=2, default=str), file=sys.stderr)
        return 1

    return 0


def run_types(orchestrator: ChangeTypeOrchestrator, args) -> None:
    """Print the item's types, and optionally the mapping choices for a target."""
    listing = orchestrator.list_types(Reference.by_codename(args.item))

    print(f"\n=== Current type: {listing.current_type.name} ({listing.current_type.codename}) ===")
    _print_elements(listing.current_type)

    print(f"\n=== Other types ({len(listing.other_types)}) ===")
    for content_type in listing.other_types:
        print(f"  {content_type.id}  {content_type.codename}  ({len(content_type.elements)} elements)")

    if not args.target:
        return

    target = (
        find_type(listing.other_types, Reference.by_id(args.target))
        or find_type(listing.other_types, Reference.by_codename(args.target))
    )
    if target is None:
        print(f"\nTarget type not found: {args.target}")
        return

    print(f"\n=== Mapping choices for {target.codename} ===")
    for element, choices in mapping_choices(target, listing.current_type):
        print(f"\n  {element.name or element.codename} [{element.id}] ({element.type.value})")
        if not choices:
            print("      (no compatible elements)")
        for choice in choices:
            print(f"      <- {choice.name or choice.codename} [{choice.id}] ({choice.type.value})")


def _print_elements(content_type: ContentType) -> None:
    for element in content_type.elements:
        print(f"  {element.id}  {element.codename}: {element.type.value}")


def run_change_type(orchestrator: ChangeTypeOrchestrator, args) -> None:
    """Run a type change from a mapping file."""
    with open(args.mapping, "rb") as f:
        pairs = parse_mapping_json(f.read())

    request = MigrationRequest.from_mapping_pairs(
        item=Reference.by_codename(args.item),
        target_type=Reference.by_id(args.type_id),
        pairs=pairs,
        language=Reference.by_codename(args.language) if args.language else None,
    )

    result = orchestrator.change_type(request)

    print("\n" + "=" * 60)
    print("TYPE CHANGE COMPLETE")
    print("=" * 60)
    print(f"New item: {result.new_item.name} ({result.new_item.id})")
    print(f"Variants updated: {len(result.updated_variants)}")
    print(f"API calls: {result.total_api_calls}")
    print(f"Duration: {result.total_milliseconds} ms")


def run_server(args) -> int:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("change_type.api.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""CLI entry point for schemaform.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the appropriate submodules or runs specific tasks.
"""

import argparse
import asyncio
import json
import subprocess
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from schemaform.config import EnvVar, get_environment
from schemaform.core import SchemaFormError, get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _read_payload(path: Path) -> Any:
    """Read a JSON payload from a file ("-" reads stdin)."""
    text = sys.stdin.read() if str(path) == "-" else path.read_text(encoding="utf-8")
    return json.loads(text)


def _parse_assignment(raw: str) -> tuple[str, Any]:
    """Parse an id=value pair; values are JSON when they parse, else strings."""
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"Expected id=value, got {raw!r}")
    field_id, value = raw.split("=", 1)
    try:
        return field_id.strip(), json.loads(value)
    except json.JSONDecodeError:
        return field_id.strip(), value


# =============================================================================
# Schema Commands
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    from schemaform.form import SchemaDiagnostic, prepare_form

    try:
        payload = _read_payload(args.file)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {args.file}: {e}")
        return 1

    form = prepare_form(payload)
    if isinstance(form, SchemaDiagnostic):
        print(form.format())
        return 1

    print(f"OK: {form.title!r} (version {form.version.raw}, {len(form.fields)} fields)")
    if form.advisory:
        print(f"Advisory: {form.advisory}")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Handle the version command."""
    from schemaform.version import (
        describe_version_problem,
        get_schema_version_info,
        legacy_advisory,
    )

    info = get_schema_version_info(args.value)
    print(f"{info.raw}: {info.status.value}")
    note = describe_version_problem(info) or legacy_advisory(info)
    if note:
        print(note)
    return 1 if info.blocks_rendering else 0


def cmd_json_schema(args: argparse.Namespace) -> int:
    """Handle the schema command."""
    from schemaform.schema import export_json_schema

    text = json.dumps(export_json_schema(), indent=2)
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        logger.info(f"JSON Schema saved to {args.output}")
    else:
        print(text)
    return 0


# =============================================================================
# Fill Command
# =============================================================================


def cmd_fill(args: argparse.Namespace) -> int:
    """Handle the fill command."""
    from schemaform.form import SchemaDiagnostic, format_rendered, prepare_form
    from schemaform.submission import StreamMessageSink

    try:
        payload = _read_payload(args.file)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {args.file}: {e}")
        return 1

    form = prepare_form(payload)
    if isinstance(form, SchemaDiagnostic):
        print(form.format())
        return 1

    session = form.create_session()
    try:
        for field_id, value in args.set:
            session.update_value(field_id, value)
    except SchemaFormError as e:
        logger.error(str(e))
        logger.info(f"Known fields: {', '.join(f.id for f in form.fields)}")
        return 1

    if not args.submit:
        rendered = session.render()
        if args.json:
            print(json.dumps(rendered.to_dict(), indent=2))
        else:
            print(format_rendered(rendered))
        return 0

    result = asyncio.run(session.deliver(StreamMessageSink(sys.stdout)))
    if not result.ok:
        print(format_rendered(session.render()))
        for issue in result.issues:
            hint = f" (suggestions: {issue.suggestions})" if issue.suggestions else ""
            print(f"  {issue.field_id}: {issue.message}{hint}")
        return 1

    if result.message is None:
        print(json.dumps(result.payload, indent=2))
    if session.delivery.error:
        logger.error(f"Delivery failed: {session.delivery.error}")
        return 1
    return 0


# =============================================================================
# Fetch Command
# =============================================================================


def cmd_fetch(args: argparse.Namespace) -> int:
    """Handle the fetch command."""
    from schemaform.form import SchemaDiagnostic, prepare_form
    from schemaform.loader import LoadStatus, SchemaLoader

    async def _load():
        async with SchemaLoader(base_url=args.base_url, timeout=args.timeout) as loader:
            return await loader.load(args.url)

    state = asyncio.run(_load())
    if state.status != LoadStatus.SUCCESS:
        print(f"{state.title}: {state.message}")
        if state.visible_details:
            print(state.visible_details)
        return 1

    form = prepare_form(state.data)
    if isinstance(form, SchemaDiagnostic):
        print(form.format())
        return 1

    print(f"Loaded {form.title!r} from {state.url} ({len(form.fields)} fields)")
    if args.json:
        print(state.data.model_dump_json(indent=2, by_alias=True, exclude_none=True))
    return 0


def handle_schema_command(argv: list[str], command: str) -> int:
    """Handle schema-level commands (validate, version, schema, fill, fetch)."""
    parser = argparse.ArgumentParser(prog=f"python . {command}")

    if command == "validate":
        parser.description = "Validate a schema payload file"
        parser.add_argument("file", type=Path, help="JSON payload file ('-' for stdin)")
        parser.set_defaults(func=cmd_validate)
    elif command == "version":
        parser.description = "Classify a schema version string"
        parser.add_argument("value", type=str, help="Declared version, e.g. 1 or 1.2.0")
        parser.set_defaults(func=cmd_version)
    elif command == "schema":
        parser.description = "Export the payload JSON Schema"
        parser.add_argument(
            "--output",
            "-o",
            type=Path,
            default=None,
            help="Output file path (prints to stdout if not specified)",
        )
        parser.set_defaults(func=cmd_json_schema)
    elif command == "fill":
        parser.description = "Fill a form from the command line and optionally submit it"
        parser.add_argument("file", type=Path, help="JSON payload file ('-' for stdin)")
        parser.add_argument(
            "--set",
            "-s",
            type=_parse_assignment,
            action="append",
            default=[],
            metavar="ID=VALUE",
            help="Set a field value (JSON literals are decoded)",
        )
        parser.add_argument(
            "--submit",
            action="store_true",
            help="Validate and submit, printing the outbound message",
        )
        parser.add_argument(
            "--json", action="store_true", help="Print the rendered form as JSON"
        )
        parser.set_defaults(func=cmd_fill)
    elif command == "fetch":
        parser.description = "Fetch and check a remote schema"
        parser.add_argument("url", type=str, help="'/'-relative path or http(s) URL")
        parser.add_argument(
            "--base-url",
            type=str,
            default=None,
            help="Base for relative paths (default: SCHEMAFORM_SCHEMA_BASE_URL)",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Request timeout in seconds (default: SCHEMAFORM_LOAD_TIMEOUT)",
        )
        parser.add_argument("--json", action="store_true", help="Print the loaded payload")
        parser.set_defaults(func=cmd_fetch)

    args = parser.parse_args(argv)
    return args.func(args)


# =============================================================================
# Development Commands
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . dev test                # Run all tests
        python . dev test --unit         # Run only unit tests
        python . dev test --integration  # Run integration tests
        python . dev test -k "loader"    # Run tests matching pattern
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


def handle_dev_command(argv: list[str]) -> int:
    """Handle development workflow commands.

    Usage:
        python . dev test [args]       # Run pytest
    """
    if not argv:
        print("Development workflow commands")
        print("\nUsage: python . dev {command} [args]")
        print("\nCommands:")
        print("  test       Run pytest with tier options")
        print("\nExamples:")
        print("  python . dev test --unit           # Fast unit tests")
        print("  python . dev test --integration    # Integration tests")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    dev_commands = {
        "test": lambda: cmd_test(subargs),
    }

    if subcommand in dev_commands:
        return dev_commands[subcommand]()

    logger.error(f"Unknown dev command: {subcommand}")
    return handle_dev_command([])


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Schemas ===")
    print("  validate   Validate a schema payload file")
    print("  version    Classify a schema version string")
    print("  schema     Export the payload JSON Schema")
    print("\n=== Forms ===")
    print("  fill       Fill and submit a form from the command line")
    print("  fetch      Fetch and check a remote schema")
    print("\n=== Development ===")
    print("  dev        Development workflows (test)")
    print("\nExamples:")
    print("  python . validate examples/profile.json")
    print("  python . version 1.2")
    print("  python . fill profile.json --set age=42 --set role=admin --submit")
    print("  python . fetch /schemas/profile.json --base-url http://localhost:3000")
    print("  python . dev test --unit")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    if command == "dev":
        return handle_dev_command(rest_args)

    if command in ("validate", "version", "schema", "fill", "fetch"):
        setup_logging(get_environment(EnvVar.SCHEMAFORM_LOG_LEVEL))
        return handle_schema_command(rest_args, command)

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

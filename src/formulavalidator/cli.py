"""Command-line interface for the formula validator."""

import argparse
import json
import logging
import sys
from pathlib import Path

import uvicorn

from .config import settings
from .engine import FormulaEngine, InvalidOutcome, grammar_document, outcome_to_dict


def _parse_assignment(text: str) -> tuple[str, float]:
    """Parse NAME=VALUE into a symbol id and a number."""
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    try:
        return name, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Formula Validator - validate and evaluate formulas"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Validate and evaluate one formula")
    check_parser.add_argument("formula", help="Formula text, e.g. 'sqrt($a^2 + $b^2)'")
    check_parser.add_argument(
        "--var", dest="variables", action="append", type=_parse_assignment, default=[],
        metavar="NAME=VALUE", help="Variable value (repeatable)",
    )
    check_parser.add_argument(
        "--const", dest="constants", action="append", type=_parse_assignment, default=[],
        metavar="NAME=VALUE", help="Constant value (repeatable)",
    )

    # Grammar command
    subparsers.add_parser("grammar", help="Print the shared grammar as JSON")

    # Conformance command
    conformance_parser = subparsers.add_parser(
        "conformance", help="Run conformance vectors against the engine"
    )
    conformance_parser.add_argument(
        "--vectors", type=Path, help="Vector file (default: packaged vectors)"
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level)

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "check":
        sys.exit(run_check(args.formula, args.variables, args.constants))
    elif args.command == "grammar":
        print(json.dumps(grammar_document(), indent=2))
    elif args.command == "conformance":
        sys.exit(run_conformance_command(args.vectors))
    else:
        parser.print_help()
        sys.exit(2)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "formulavalidator.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_check(formula: str, variables: list, constants: list) -> int:
    """Print the outcome JSON; return 0 when valid and 1 otherwise."""
    engine = FormulaEngine(log_formulas=settings.log_formulas)
    outcome = engine.validate_formula(
        formula,
        [{"id": name, "value": value} for name, value in variables],
        [{"id": name, "value": value} for name, value in constants],
    )
    print(json.dumps(outcome_to_dict(outcome)))
    return 1 if isinstance(outcome, InvalidOutcome) else 0


def run_conformance_command(path: Path = None) -> int:
    """Run a vector file and print a summary."""
    from .conformance import load_vectors, run_conformance

    try:
        cases = load_vectors(path)
    except (OSError, ValueError) as e:
        print(f"Could not load conformance vectors: {e}", file=sys.stderr)
        return 2

    report = run_conformance(cases)
    for mismatch in report.mismatches:
        print(f"FAIL {mismatch.name}: {mismatch.formula!r}")
        print(f"  expected: {json.dumps(mismatch.expected)}")
        print(f"  actual:   {json.dumps(mismatch.actual)}")
    print(report.summary())
    return 0 if report.ok else 1


if __name__ == "__main__":
    main()

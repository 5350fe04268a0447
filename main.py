# main.py
"""Command line entry point: parse Paradox game data and write the requirement graph."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence

import structlog

import config
from config.schema_loader import load_collection_configs
from config.validator import validate_all
from core.exceptions import ReqGraphError, ValidationError
from core.logging_config import setup_logging
from core.requirements import RequirementGraphService
from models.facet_constants import AUTHORITIES, COLLECTION_NAMES, ETHICS
from utils import load_documents, write_json_file

logger = structlog.get_logger(__name__)

DOCUMENT_NAMES: tuple[str, ...] = (*COLLECTION_NAMES, AUTHORITIES)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a symmetric requirement/incompatibility graph from Paradox script files"
    )
    for name in DOCUMENT_NAMES:
        parser.add_argument(
            f"--{name}",
            action="append",
            default=[],
            metavar="FILE",
            help=f"{name} definition file (repeatable; later files override earlier entries)",
        )
    parser.add_argument(
        "--schema",
        "-s",
        type=str,
        default=None,
        help="YAML file overriding the built-in collection schemas",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output JSON path (default: BASE_OUTPUT_DIR/OUTPUT_FILE)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=None,
        help="Override LOG_LEVEL for this run",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Print the configuration health report and exit",
    )
    return parser


def _validate_inputs(args: argparse.Namespace) -> None:
    if not any(getattr(args, name) for name in DOCUMENT_NAMES):
        raise ValidationError("At least one collection file is required")
    if getattr(args, AUTHORITIES) and not getattr(args, ETHICS):
        raise ValidationError(
            "--authorities only affects ethics; pass --ethics as well",
            details={"authorities": getattr(args, AUTHORITIES)},
        )


def run(args: argparse.Namespace) -> str:
    """Build the graph described by ``args`` and return the written output path."""
    _validate_inputs(args)

    schema_file = args.schema or config.settings.COLLECTION_SCHEMA_FILE
    configs = load_collection_configs(schema_file) if schema_file else None
    service = RequirementGraphService(configs=configs)

    documents = {name: load_documents(getattr(args, name)) for name in DOCUMENT_NAMES if getattr(args, name)}
    collections = service.build_all(documents)

    output_path = args.output or os.path.join(config.settings.BASE_OUTPUT_DIR, config.settings.OUTPUT_FILE)
    write_json_file(output_path, service.to_json_payload(collections), indent=config.settings.JSON_INDENT)
    logger.info("Requirement graph written", path=output_path)
    return output_path


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the requirement graph CLI. Returns the process exit code."""
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.check_config:
        report = validate_all()
        print(f"Configuration health: {report['overall_health']}")
        for severity, entries in report["issues"].items():
            for entry in entries:
                print(f"  [{severity}] {entry['field']}: {entry['message']}")
        return 1 if report["overall_health"] == "error" else 0

    try:
        output_path = run(args)
    except ReqGraphError as e:
        logger.error("Requirement graph build failed", error=str(e))
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down due to KeyboardInterrupt...")
        return 130

    print(f"✅ Requirement graph written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

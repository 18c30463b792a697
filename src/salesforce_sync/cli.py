"""salesforce-mapping command: inspect and validate mapping definitions.

Usage:
    salesforce-mapping list
    salesforce-mapping validate [CLASS ...]
    salesforce-mapping --path ./config/salesforce validate

Exit code 0 if every requested class is valid, 1 otherwise.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

import structlog
from sqlalchemy.orm import Session

from src.salesforce_sync.bootstrap import build_mapper
from src.salesforce_sync.config import Settings, get_settings
from src.salesforce_sync.core.database import close_db, get_session
from src.salesforce_sync.core.logging import configure_structlog
from src.salesforce_sync.mapping.exceptions import MappingException
from src.salesforce_sync.mapping.mapper import Mapper

logger = structlog.get_logger(__name__)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="salesforce-mapping",
        description="Inspect and validate Salesforce mapping definitions",
    )
    parser.add_argument(
        "--path",
        action="append",
        dest="paths",
        help="Mapping search root (repeatable, overrides MAPPING_PATHS)",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="List mapped classes")
    validate = sub.add_parser("validate", help="Validate mappings against the local schema")
    validate.add_argument("classes", nargs="*", help="Classes to validate (default: all)")
    return parser


def list_mappings(mapper: Mapper, class_names: Sequence[str]) -> int:
    """One line per class: name, Salesforce type, identity kind, matching field."""
    for class_name in class_names:
        metadata = mapper.load_metadata_for_class(class_name)
        identity = metadata.get_local_identity()
        kind = identity.kind.value if identity is not None else "fullRemote"
        matching_field = metadata.get_matching_field() or "-"
        print(f"{class_name}\t{metadata.salesforce_type}\t{kind}\t{matching_field}")
    return 0


def validate_mappings(mapper: Mapper, class_names: Sequence[str]) -> int:
    failures = 0
    for class_name in class_names:
        try:
            mapper.validate_mapping(class_name)
        except MappingException as exc:
            failures += 1
            print(f"[FAIL] {class_name}: {exc}")
            logger.warning("cli.validation_failed", class_name=class_name, error=str(exc))
        else:
            print(f"[ OK ] {class_name}")

    print(f"\n{len(class_names) - failures}/{len(class_names)} mappings valid")
    return 1 if failures else 0


def _run(args: argparse.Namespace, settings: Settings, session: Session) -> int:
    mapper = build_mapper(session, settings, paths=args.paths)
    try:
        if args.command == "validate" and args.classes:
            class_names = list(args.classes)
        else:
            class_names = mapper.get_all_class_names()

        if args.command == "list":
            return list_mappings(mapper, class_names)
        return validate_mappings(mapper, class_names)
    except MappingException as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def main(argv: Sequence[str] | None = None, session: Session | None = None) -> int:
    """Entry point. Without an injected ``session`` one is opened on the
    configured engine, and the engine is disposed before returning."""
    args = _parser().parse_args(argv)
    configure_structlog()
    settings = get_settings()

    if session is not None:
        return _run(args, settings, session)

    try:
        with get_session() as own_session:
            return _run(args, settings, own_session)
    finally:
        close_db()


if __name__ == "__main__":
    sys.exit(main())

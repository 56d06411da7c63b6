from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from projvar import __version__
from projvar.app import list_properties, run_projvar
from projvar.common.logging import Verbosity, configure_logging
from projvar.config import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_FILE_OUT,
    DEFAULT_PROJECT_ROOT,
    ConfigurationError,
    HostingType,
    ReportTarget,
    Settings,
    build_requirement_selection,
    parse_key_value,
)
from projvar.domain.catalog import DEFAULT_KEY_PREFIX
from projvar.domain.errors import MissingRequiredPropertiesError
from projvar.domain.policy import OverwritePolicy
from projvar.domain.sources import DEFAULT_MAIN_SOURCES, SourceKind

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from enum import StrEnum
    from types import FrameType

log = logging.getLogger(__name__)


E = TypeVar("E", bound="StrEnum")


def _enum_choice(enum_type: type[E]) -> Callable[[str], E]:
    """argparse ``type`` accepting enum values case-insensitively."""

    def parse(value: str) -> E:
        for member in enum_type:
            if member.value.casefold() == value.strip().casefold():
                return member
        choices = ", ".join(member.value for member in enum_type)
        raise argparse.ArgumentTypeError(f"invalid choice: '{value}' (choose from {choices})")

    return parse


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="projvar",
        description=(
            "Retrieve project properties (name, version, license, repository URLs, "
            "build metadata) from git, CI, files and the environment, "
            "and write them out as KEY=VALUE pairs"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sources = parser.add_argument_group("sources")
    sources.add_argument(
        "-C",
        "--project-root",
        type=Path,
        help="Root directory of the project (default: the current directory)",
    )
    sources.add_argument(
        "-D",
        "--variable",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="A key-value pair to be used as input; may be repeated",
    )
    sources.add_argument(
        "-I",
        "--variables-file",
        action="append",
        default=[],
        metavar="FILE",
        help="A file with KEY=VALUE lines to be used as input ('-' for stdin); may be repeated",
    )
    sources.add_argument(
        "-x",
        "--no-env-in",
        action="store_true",
        help="Do not read values from the process environment",
    )
    sources.add_argument(
        "-t",
        "--hosting-type",
        type=_enum_choice(HostingType),
        default=HostingType.UNKNOWN,
        help="Repository hosting software, instead of detecting it from the URL",
    )
    sources.add_argument(
        "-T",
        "--date-format",
        default=DEFAULT_DATE_FORMAT,
        help="strftime format for dates (default: %(default)s)",
    )

    outputs = parser.add_argument_group("outputs")
    outputs.add_argument(
        "-e",
        "--env-out",
        action="store_true",
        help="Write the resolved values to the process environment",
    )
    outputs.add_argument(
        "-O",
        "--file-out",
        action="append",
        type=Path,
        default=[],
        metavar="FILE",
        help=f"Write the resolved values to FILE; may be repeated (default: {DEFAULT_FILE_OUT})",
    )
    outputs.add_argument(
        "-o",
        "--overwrite",
        type=_enum_choice(OverwritePolicy),
        default=OverwritePolicy.ALL,
        help="Which values already present in an output may be replaced (default: %(default)s)",
    )
    outputs.add_argument(
        "--main-source",
        action="append",
        type=_enum_choice(SourceKind),
        default=[],
        metavar="SOURCE",
        help="Source kind counted as 'main' by the overwrite policy; may be repeated",
    )
    outputs.add_argument(
        "--key-prefix",
        default=DEFAULT_KEY_PREFIX,
        help="Prefix of every output key (default: %(default)s)",
    )
    outputs.add_argument(
        "-d",
        "--dry",
        action="store_true",
        help="Do not write to the process environment",
    )
    outputs.add_argument(
        "-A",
        "--show-all-retrieved",
        nargs="?",
        const="",
        metavar="MD-FILE",
        help="Report every value found by every source, to MD-FILE or the log",
    )
    outputs.add_argument(
        "-P",
        "--show-primary-retrieved",
        nargs="?",
        const="",
        metavar="MD-FILE",
        help="Report the chosen value of every property, to MD-FILE or the log",
    )

    requirements = parser.add_argument_group("requirements")
    requirements.add_argument(
        "-f",
        "--fail",
        action="store_true",
        help="Fail if a required property has no value",
    )
    requirements.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Require every known property",
    )
    requirements.add_argument(
        "-n",
        "--none",
        action="store_true",
        help="Require no property",
    )
    requirements.add_argument(
        "-R",
        "--require",
        action="append",
        default=[],
        metavar="KEY",
        help="Require this property (e.g. Name or PROJECT_NAME); may be repeated",
    )
    requirements.add_argument(
        "-N",
        "--require-not",
        action="append",
        default=[],
        metavar="KEY",
        help="Do not require this property; may be repeated",
    )
    requirements.add_argument(
        "--only-required",
        action="store_true",
        help="Only output required properties",
    )
    requirements.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List all known properties and exit",
    )

    logs = parser.add_argument_group("logging")
    logs.add_argument(
        "-F",
        "--log-level",
        type=_enum_choice(Verbosity),
        default=Verbosity.INFO,
        help="Base log level (default: %(default)s)",
    )
    logs.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More verbose logging; may be repeated",
    )
    logs.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log errors to the console",
    )
    logs.add_argument(
        "-L",
        "--log-file",
        type=Path,
        help="Also write the log to this file",
    )
    return parser.parse_args(list(argv))


def _report_target(value: str | None) -> ReportTarget | None:
    if value is None:
        return None
    return ReportTarget(Path(value) if value else None)


def _build_settings(args: argparse.Namespace) -> Settings:
    requirements = build_requirement_selection(
        require_all=args.all,
        require_none=args.none,
        require=args.require,
        require_not=args.require_not,
        prefix=args.key_prefix,
    )
    return Settings(
        project_root=args.project_root or DEFAULT_PROJECT_ROOT,
        project_root_explicit=args.project_root is not None,
        variables=tuple(parse_key_value(pair) for pair in args.variable),
        variables_files=tuple(args.variables_file),
        env_in=not args.no_env_in,
        env_out=args.env_out,
        file_out=tuple(args.file_out) or (DEFAULT_FILE_OUT,),
        hosting_type=args.hosting_type,
        requirements=requirements,
        fail_fast=args.fail,
        only_required=args.only_required,
        key_prefix=args.key_prefix,
        dry=args.dry,
        overwrite=args.overwrite,
        main_sources=frozenset(args.main_source) or DEFAULT_MAIN_SOURCES,
        date_format=args.date_format,
        show_all_retrieved=_report_target(args.show_all_retrieved),
        show_primary_retrieved=_report_target(args.show_primary_retrieved),
        verbosity=args.log_level.up(args.verbose),
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    verbosity: Verbosity = parsed_args.log_level.up(parsed_args.verbose)
    configure_logging(
        level=verbosity.level,
        log_file=parsed_args.log_file,
        quiet=parsed_args.quiet,
        force=True,
    )

    if parsed_args.list:
        log.info("Known properties:\n\n%s\n", list_properties(parsed_args.key_prefix))
        return

    try:
        settings = _build_settings(parsed_args)
    except ConfigurationError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        run_projvar(settings)
    except MissingRequiredPropertiesError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during run")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)

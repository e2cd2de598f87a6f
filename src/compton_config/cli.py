"""Command-line tool that loads a configuration file and prints the result."""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Iterable, Optional

import yaml

from .errors import FatalConfigError
from .loader import load_config
from .logging import LOG_LEVELS, configure_logging, get_logger
from .options import ConfigurationRecord

ENV_PREFIX = "COMPTON_"


class CliError(Exception):
    """Raised when the CLI encounters an expected error condition."""


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compton-config",
        description=(
            "Load a compton configuration file the way the compositor does and "
            "print the resulting options. Without --config the XDG config "
            "directories and ~/.compton.conf are searched."
        ),
    )
    parser.add_argument(
        "--config",
        default=_env("CONFIG"),
        help=f"Path to the configuration file (env: {ENV_PREFIX}CONFIG).",
    )
    parser.add_argument(
        "--output",
        choices=["json", "yaml"],
        default="json",
        help="Output format for the loaded options. Defaults to 'json'.",
    )
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default="WARN",
        help="Log verbosity; a log-level option in the file takes precedence.",
    )
    parser.add_argument(
        "--log-format",
        choices=["plain", "json"],
        default="plain",
        help="Format of log messages written to stderr.",
    )
    return parser


def _print_output(data: Any, output: str) -> None:
    if output == "yaml":
        yaml.safe_dump(data, sys.stdout, sort_keys=False)
    else:
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")


def run(args: argparse.Namespace) -> int:
    record = ConfigurationRecord()
    result = load_config(record, args.config, log_handle=get_logger("compton"))
    if result is None:
        raise CliError("Configuration file could not be parsed")
    _print_output(
        {
            "path": result.path,
            "blur_kern_has_negative": result.blur_kern_has_negative,
            "options": record.to_dict(),
        },
        args.output,
    )
    return 0


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(args=argv)
    configure_logging(args.log_level, args.log_format)

    try:
        run(args)
    except FatalConfigError as exc:
        sys.stderr.write(f"Fatal: {exc}\n")
        sys.exit(1)
    except CliError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()

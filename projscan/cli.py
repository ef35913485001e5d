"""Command-line entry point for projscan.

Prints each command's result as JSON on stdout and saves a copy under the
output directory. Logging goes to stderr.
"""

from __future__ import annotations

import json
import os
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Any

DIRECTORY_COMMANDS = {
    "git": "Snapshot the Git repository in a directory",
    "all": "Run every parser over a directory, honoring .gitignore",
    "java": "Parse Java source files in a directory",
    "pom": "Parse Maven pom.xml files in a directory",
    "html": "Parse HTML files in a directory",
    "markdown": "Parse Markdown files in a directory",
}


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="projscan",
        description=(
            "Extract structured metadata from Git repositories and project files"
        ),
    )
    parser.add_argument(
        "--log-format",
        choices=["pretty", "json"],
        help="Log format (pretty or json). Overrides config and LOG_FORMAT env var.",
    )
    parser.add_argument(
        "--log-colors",
        type=lambda x: x.lower() in ("true", "1", "yes", "on"),
        help="Enable colored logs (true/false). Overrides config and LOG_COLORS.",
    )
    parser.add_argument(
        "--output-dir",
        help="Directory for parser_<command>.json result files (default: .parsed)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    for name, help_text in DIRECTORY_COMMANDS.items():
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("directory", help="Directory to parse")
    file_parser = commands.add_parser(
        "file", help="Parse one pom.xml, .java, .html or Markdown file"
    )
    file_parser.add_argument("path", help="File to parse")
    commands.add_parser("version", help="Show the projscan version")
    return parser


def _apply_logging_flags(args: Namespace) -> None:
    # CLI flags take precedence over config and environment
    if args.log_format:
        os.environ["LOG_FORMAT"] = args.log_format
    if args.log_colors is not None:
        os.environ["LOG_COLORS"] = "true" if args.log_colors else "false"


def _load_configuration(workdir: Path) -> None:
    """Load .env, then global and project-local config, into settings."""
    from dotenv import load_dotenv

    from projscan.config import create_config_manager, get_default_config, settings
    from projscan.config.constants import (
        CONFIG_DIR_ENV,
        DEFAULT_CONFIG_DIRNAME,
        LOCAL_CONFIG_FILENAME,
    )
    from projscan.utils.logger import cli_logger, configure_structlog

    env_file = workdir / ".env"
    if env_file.exists():
        load_dotenv(dotenv_path=env_file, override=False)
        cli_logger.debug("Loaded .env file", path=str(env_file))

    config_dir = Path(
        os.getenv(CONFIG_DIR_ENV) or Path.home() / DEFAULT_CONFIG_DIRNAME
    ).expanduser()
    local_config = workdir / LOCAL_CONFIG_FILENAME
    manager = create_config_manager(
        config_dir,
        local_config_path=local_config if local_config.exists() else None,
        defaults=get_default_config(),
    )
    manager.initialize()
    settings.attach(manager)

    # Config-file logging values apply unless env or flags already set them
    os.environ.setdefault("LOG_LEVEL", str(settings.log_level))
    os.environ.setdefault("LOG_FORMAT", str(settings.log_format))
    os.environ.setdefault("LOG_COLORS", "true" if settings.log_colors else "false")
    configure_structlog()


def save_result(result: dict[str, Any], output_dir: Path, command: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / f"parser_{command}.json"
    target.write_text(
        json.dumps(result, indent=2, ensure_ascii=False, default=str), encoding="utf-8"
    )
    return target


def main(argv: list[str] | None = None) -> int:
    # Parse arguments FIRST so --help works without touching config
    args = build_parser().parse_args(argv)
    _apply_logging_flags(args)

    if args.command == "version":
        from projscan import __version__

        print(f"projscan {__version__}")
        return 0

    from projscan.config.schema import ConfigValidationError
    from projscan.utils.logger import cli_logger

    workdir = Path.cwd()
    try:
        _load_configuration(workdir)
    except (ConfigValidationError, OSError) as exc:
        cli_logger.error("Failed to initialize configuration", error=str(exc))
        return 1

    from projscan.config import settings
    from projscan.core import COMMANDS, is_error

    target = args.path if args.command == "file" else args.directory
    cli_logger.info("Running command", command=args.command, target=target)
    result = COMMANDS[args.command](target)

    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    output_dir = Path(args.output_dir or settings.output_dir)
    if not output_dir.is_absolute():
        output_dir = workdir / output_dir
    try:
        saved = save_result(result, output_dir, args.command)
        cli_logger.info("Result saved", path=str(saved))
    except OSError as exc:
        cli_logger.error("Could not save result", error=str(exc))
        return 1

    return 1 if is_error(result) else 0


if __name__ == "__main__":
    sys.exit(main())

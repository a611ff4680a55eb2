"""
Command line entry point.

Loads the configuration and aliases, configures logging, builds the bot and
runs it until the chat connection closes. Startup errors exit with status 1.
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable

from querybot.constants import DEFAULT_CONFIG_FILE
from querybot.core.app.bot import QueryBot, build_bot
from querybot.core.common.exceptions import ChatTransportError, ConfigurationError
from querybot.core.common.logging_utils import (
    configure_logging_with_environment_tagging,
    install_token_redaction_filter,
)
from querybot.core.config.app_config import AppConfig, LogLevel
from querybot.core.config.config_loader import ConfigLoader
from querybot.core.services.alias_service import load_alias_definitions


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the chat bot that answers game server queries"
    )
    parser.add_argument(
        "--config",
        dest="config_file",
        metavar="FILE",
        default=DEFAULT_CONFIG_FILE,
        help=f"Path to the YAML or JSON configuration (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--aliases",
        dest="aliases_file",
        metavar="FILE",
        default=None,
        help="Path to the alias definitions (overrides aliases_file in the config)",
    )
    parser.add_argument(
        "--log",
        dest="log_file",
        metavar="FILE",
        default=None,
        help="Append logs to FILE (overrides logging.log_file in the config)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="Set the logging level",
    )
    return parser


def parse_cli_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_cli_parser().parse_args(argv)


def apply_cli_args(args: argparse.Namespace) -> AppConfig:
    """Load the configuration file and apply command line overrides."""
    cfg = ConfigLoader().load(args.config_file)
    if args.aliases_file is not None:
        cfg.aliases_file = args.aliases_file
    if args.log_file is not None:
        cfg.logging.log_file = args.log_file
    if args.log_level is not None:
        cfg.logging.level = LogLevel(args.log_level)
    return cfg


def _configure_logging(cfg: AppConfig) -> None:
    configure_logging_with_environment_tagging(
        level=getattr(logging, cfg.logging.level.value),
        log_file=cfg.logging.log_file,
    )
    install_token_redaction_filter([cfg.auth_token])


def main(
    argv: list[str] | None = None,
    build_bot_fn: Callable[..., QueryBot] = build_bot,
) -> None:
    args = parse_cli_args(argv)

    try:
        cfg = apply_cli_args(args)
    except ConfigurationError as e:
        sys.stderr.write(f"ERROR: {e.message}\n")
        sys.exit(1)

    _configure_logging(cfg)
    logging.info("Configuration: %s", cfg.redacted())

    try:
        definitions = load_alias_definitions(cfg.aliases_file)
        bot = build_bot_fn(cfg, definitions)
    except ConfigurationError as e:
        logging.critical("Startup failed: %s %s", e.message, e.details)
        sys.stderr.write(f"ERROR: {e.message}\n")
        sys.exit(1)

    try:
        asyncio.run(bot.run())
    except ChatTransportError as e:
        logging.critical("Chat connection failed: %s", e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        logging.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()

"""Entrypoint. Loads config and runs one IRC connection with the NickServ plugin."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from nickserv import __version__
from nickserv.adapters.irc import NickServClient
from nickserv.config import Config, NickServConfig, cfg, load_config_with_env
from nickserv.core.errors import NickServConfigurationError
from nickserv.events import IdentityConfirmed
from nickserv.gateway import Bus


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. Replace default logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        diagnose=False,
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan> | {message}"
        ),
    )


def reload_config(config_path: Path) -> Config:
    """Load config from path and update global cfg."""
    data = load_config_with_env(config_path)
    cfg.reload(data)
    return cfg


class IdentityLogger:
    """Logs identity confirmations published on the bus."""

    def accept_event(self, source: str, evt: object) -> bool:
        return isinstance(evt, IdentityConfirmed)

    def push_event(self, source: str, evt: object) -> None:
        if isinstance(evt, IdentityConfirmed):
            logger.info("Identity confirmed for {}", evt.nickname)


def build_client(config: Config, bus: Bus) -> NickServClient:
    """Create the pydle client from loaded config."""
    kwargs: dict = {}
    if config.irc_fallback_nicknames:
        kwargs["fallback_nicknames"] = config.irc_fallback_nicknames
    if config.irc_username:
        kwargs["username"] = config.irc_username
    if config.irc_realname:
        kwargs["realname"] = config.irc_realname

    return NickServClient(
        config.irc_nick,
        config=NickServConfig.from_mapping(config.nickserv),
        bus=bus,
        server=config.irc_server,
        **kwargs,
    )


def main() -> None:
    """Main entrypoint."""
    parser = argparse.ArgumentParser(
        description="IRC bot connection with NickServ identification and ghost recovery"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    if not args.config.exists():
        logger.error("Config file not found: {}", args.config)
        sys.exit(1)

    try:
        config = reload_config(args.config)
    except NickServConfigurationError as exc:
        logger.error("Invalid configuration ({}): {}", exc.details.get("key"), exc)
        sys.exit(1)
    logger.info("Config loaded from {}", args.config)

    bus = Bus()
    bus.register(IdentityLogger())
    client = build_client(config, bus)

    try:
        asyncio.run(_run(client, config))
    except KeyboardInterrupt:
        logger.info("Interrupted")


async def _run(client: NickServClient, config: Config) -> None:
    """Async run loop. Connect and wait."""
    await client.connect(
        hostname=config.irc_server,
        port=config.irc_port,
        tls=config.irc_tls,
        tls_verify=config.irc_tls_verify,
    )

    try:
        while True:
            await asyncio.sleep(60)
    except asyncio.CancelledError:
        logger.info("Shutting down")
        await client.disconnect()


if __name__ == "__main__":
    main()

# src/amlguard/main.py
"""Process entry point: config, logging, wiring, polling loop and graceful shutdown."""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv
from telegram import Update

from amlguard.boot import bootstrap_app, build_services
from amlguard.config import Settings, resolve_settings
from amlguard.domain.errors import ConfigError
from amlguard.interfaces.api.status import DEFAULT_GRACE_PERIOD, StatusServer
from amlguard.interfaces.telegram.translations import TranslationStore
from amlguard.logging_conf import setup_logging
from amlguard.monitoring.metrics import Metrics

log = logging.getLogger(__name__)


async def run(
    settings: Settings,
    translations: TranslationStore,
    stop_event: Optional[asyncio.Event] = None,
    metrics: Optional[Metrics] = None,
) -> None:
    metrics = metrics or Metrics()
    ptb_app = bootstrap_app(settings)
    services = build_services(settings, ptb_app, metrics, translations=translations)
    status_server = StatusServer(metrics, host=settings.server.host, port=settings.server.port)

    stop_event = stop_event or asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    status_server.start()
    try:
        async with ptb_app:
            await ptb_app.start()
            await ptb_app.updater.start_polling(timeout=60, allowed_updates=[Update.MESSAGE])
            metrics.set_bot_connected(True)
            metrics.set_aml_connected(True)
            log.info(f"Bot started as @{ptb_app.bot.username}")

            await stop_event.wait()

            log.info("Shutdown requested, stopping update polling...")
            await ptb_app.updater.stop()
            await ptb_app.stop()
    finally:
        metrics.set_bot_connected(False)
        metrics.set_aml_connected(False)
        if not await asyncio.to_thread(status_server.stop, DEFAULT_GRACE_PERIOD):
            log.warning("Status server forced to shut down.")
        await services["aml_provider"].aclose()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        log.info("Bot stopped.")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="amlguard", description="Telegram bot for AML address checks.")
    parser.add_argument("--config", help="path to config.yml (default: $AMLGUARD_CONFIG or config/config.yml)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    load_dotenv()
    args = parse_args(argv)
    try:
        settings, source = resolve_settings(args.config)
        settings.require_credentials()
        setup_logging(settings.logging.level, settings.logging.file)
        if source is None:
            log.warning("Config file not found, using environment defaults.")
        else:
            log.info(f"Loaded configuration from {source} (status port {settings.server.port}).")
        translations = TranslationStore.load()
    except ConfigError as e:
        sys.exit(f"Fatal: {e}")

    asyncio.run(run(settings, translations))


if __name__ == "__main__":
    main()

# src/amlguard/boot.py

import logging
from typing import Any, Dict, Optional

from telegram.ext import Application
from telegram.request import HTTPXRequest

from amlguard.config import Settings
from amlguard.application.services import AMLService
from amlguard.infrastructure.aml.provider_client import AMLProviderClient
from amlguard.infrastructure.notify.telegram import TelegramNotifier
from amlguard.interfaces.telegram.dispatcher import MessageDispatcher
from amlguard.interfaces.telegram.handlers import register_all_handlers
from amlguard.interfaces.telegram.translations import TranslationStore
from amlguard.monitoring.metrics import Metrics

log = logging.getLogger(__name__)


def build_services(
    settings: Settings,
    ptb_app: Application,
    metrics: Metrics,
    translations: Optional[TranslationStore] = None,
) -> Dict[str, Any]:
    """Build and wire the provider client, AML service and dispatcher."""
    log.info("Building application services...")
    services: Dict[str, Any] = {"metrics": metrics}

    services["translations"] = translations or TranslationStore.load()
    services["aml_provider"] = AMLProviderClient(
        api_key=settings.aml.api_key,
        base_url=settings.aml.base_url,
        timeout=settings.aml.timeout,
    )
    services["aml_service"] = AMLService(services["aml_provider"], metrics=metrics)
    services["notifier"] = TelegramNotifier(ptb_app.bot)
    services["dispatcher"] = MessageDispatcher(
        aml_service=services["aml_service"],
        translations=services["translations"],
        send_text=services["notifier"].send_text,
        metrics=metrics,
    )

    register_all_handlers(ptb_app, services["dispatcher"])
    ptb_app.bot_data["services"] = services

    log.info("All services built and wired successfully.")
    return services


def bootstrap_app(settings: Settings) -> Application:
    """Builds the Telegram Application. Updates are processed one at a time."""
    request = HTTPXRequest(
        connection_pool_size=8,
        read_timeout=10.0,
        write_timeout=10.0,
        connect_timeout=5.0,
    )
    ptb_app = (
        Application.builder()
        .token(settings.telegram.token)
        .request(request)
        .concurrent_updates(False)
        .build()
    )
    log.info("Telegram Application built successfully.")
    return ptb_app

import asyncio
import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

import amlguard.main as main_module
from amlguard.config import AMLSettings, Settings, TelegramSettings
from amlguard.interfaces.api.status import DEFAULT_GRACE_PERIOD
from amlguard.main import main, run
from amlguard.monitoring.metrics import Metrics


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram=TelegramSettings(token="123456:TEST-token"),
        aml=AMLSettings(api_key="secret"),
    )


@pytest.fixture
def ptb_app() -> MagicMock:
    app = MagicMock()
    app.start = AsyncMock()
    app.stop = AsyncMock()
    app.updater.start_polling = AsyncMock()
    app.updater.stop = AsyncMock()
    app.bot.username = "AmlGuardBot"
    return app


@pytest.fixture
def wired(monkeypatch, ptb_app: MagicMock):
    """Replaces the PTB app, the services and the status server used by run()."""
    provider = MagicMock()
    provider.aclose = AsyncMock()
    status_server = MagicMock()
    status_server.stop.return_value = True

    monkeypatch.setattr(main_module, "bootstrap_app", MagicMock(return_value=ptb_app))
    monkeypatch.setattr(main_module, "build_services", MagicMock(return_value={"aml_provider": provider}))
    monkeypatch.setattr(main_module, "StatusServer", MagicMock(return_value=status_server))
    return {"provider": provider, "status_server": status_server}


@pytest.mark.asyncio
async def test_run_shuts_down_cleanly_when_stop_is_requested(settings, translations, ptb_app, wired):
    metrics = Metrics()
    stop_event = asyncio.Event()
    stop_event.set()

    await asyncio.wait_for(run(settings, translations, stop_event=stop_event, metrics=metrics), timeout=5)

    ptb_app.start.assert_awaited_once()
    ptb_app.updater.start_polling.assert_awaited_once()
    ptb_app.updater.stop.assert_awaited_once()
    ptb_app.stop.assert_awaited_once()
    wired["status_server"].start.assert_called_once()
    wired["status_server"].stop.assert_called_once_with(DEFAULT_GRACE_PERIOD)
    wired["provider"].aclose.assert_awaited_once()
    snapshot = metrics.snapshot()
    assert snapshot.bot_connected is False
    assert snapshot.aml_connected is False


@pytest.mark.asyncio
async def test_run_reports_connected_while_polling(settings, translations, ptb_app, wired):
    metrics = Metrics()
    stop_event = asyncio.Event()
    seen = {}

    async def start_polling(**kwargs):
        seen.update(kwargs)
        asyncio.get_running_loop().call_soon(stop_event.set)

    async def stop_polling():
        seen["connected"] = metrics.snapshot().bot_connected

    ptb_app.updater.start_polling.side_effect = start_polling
    ptb_app.updater.stop.side_effect = stop_polling

    await asyncio.wait_for(run(settings, translations, stop_event=stop_event, metrics=metrics), timeout=5)

    assert seen["allowed_updates"] == ["message"]
    assert seen["connected"] is True
    assert metrics.snapshot().bot_connected is False


@pytest.mark.asyncio
async def test_run_releases_resources_when_startup_fails(settings, translations, ptb_app, wired):
    metrics = Metrics()
    ptb_app.updater.start_polling.side_effect = RuntimeError("network down")

    with pytest.raises(RuntimeError, match="network down"):
        await run(settings, translations, stop_event=asyncio.Event(), metrics=metrics)

    wired["status_server"].stop.assert_called_once_with(DEFAULT_GRACE_PERIOD)
    wired["provider"].aclose.assert_awaited_once()
    assert metrics.snapshot().bot_connected is False


@pytest.mark.asyncio
async def test_run_warns_when_status_server_is_forced_down(settings, translations, wired, caplog):
    wired["status_server"].stop.return_value = False
    stop_event = asyncio.Event()
    stop_event.set()

    with caplog.at_level(logging.WARNING, logger="amlguard"):
        await run(settings, translations, stop_event=stop_event, metrics=Metrics())

    assert "forced to shut down" in caplog.text
    wired["provider"].aclose.assert_awaited_once()


@pytest.fixture
def fresh_logging():
    """Lets main() install its own handlers on the package logger."""
    logger = logging.getLogger("amlguard")
    saved, saved_level = list(logger.handlers), logger.level
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved
    logger.setLevel(saved_level)


@pytest.fixture
def entry_env(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(main_module, "load_dotenv", lambda: None)
    fake_run = AsyncMock()
    monkeypatch.setattr(main_module, "run", fake_run)
    for name in ("AMLGUARD_CONFIG", "TELEGRAM_BOT_TOKEN", "AML_API_KEY", "TEST_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return fake_run


def read_log(logger: logging.Logger, path: Path) -> str:
    for handler in logger.handlers:
        handler.flush()
    return path.read_text(encoding="utf-8")


def test_main_logs_fallback_to_environment_defaults(monkeypatch, tmp_path: Path, entry_env, fresh_logging):
    log_file = tmp_path / "bot.log"
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "env-token")
    monkeypatch.setenv("AML_API_KEY", "env-key")
    monkeypatch.setenv("AMLGUARD_LOGGING__FILE", str(log_file))

    main(["--config", str(tmp_path / "missing.yml")])

    assert "Config file not found, using environment defaults." in read_log(fresh_logging, log_file)
    entry_env.assert_awaited_once()
    settings = entry_env.call_args.args[0]
    assert settings.telegram.token == "env-token"


def test_main_logs_config_source(monkeypatch, tmp_path: Path, entry_env, fresh_logging):
    log_file = tmp_path / "bot.log"
    config = tmp_path / "config.yml"
    config.write_text(
        "telegram:\n  token: tok\naml:\n  api_key: key\nlogging:\n  file: ${TEST_LOG_FILE}\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("TEST_LOG_FILE", str(log_file))

    main(["--config", str(config)])

    assert f"Loaded configuration from {config}" in read_log(fresh_logging, log_file)
    entry_env.assert_awaited_once()


def test_main_exits_when_credentials_are_missing(tmp_path: Path, entry_env, fresh_logging):
    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(tmp_path / "missing.yml")])

    assert "TELEGRAM_BOT_TOKEN" in str(exc_info.value.code)
    entry_env.assert_not_awaited()

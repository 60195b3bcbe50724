"""Wiring of settings, client, module source and dispatcher into a running bot."""

from __future__ import annotations

import signal
from pathlib import Path

import anyio
import discord

from .client import BotClient
from .loader import DirectoryModuleSource
from .logging import get_logger
from .router import Dispatcher
from .settings import SlashgateSettings

logger = get_logger(__name__)


def build_dispatcher(
    settings: SlashgateSettings, *, config_path: Path, token: str
) -> Dispatcher:
    client = BotClient(token)
    modules_dir = settings.resolved_modules_dir(config_path=config_path)
    dispatcher = Dispatcher(
        client,
        DirectoryModuleSource(modules_dir),
        owners=settings.owners,
        guild_id=settings.guild_id,
        support_url=settings.support_url,
    )
    client.set_interaction_handler(dispatcher.handle_interaction)
    logger.info(
        "dispatcher.config",
        modules_dir=str(modules_dir),
        guild_id=settings.guild_id,
        owners=len(dispatcher.owners),
    )
    return dispatcher


async def _reload_on_sighup(dispatcher: Dispatcher) -> None:
    if not hasattr(signal, "SIGHUP"):
        await anyio.sleep_forever()
        return
    with anyio.open_signal_receiver(signal.SIGHUP) as signals:
        logger.debug("reload.handler_installed", signal="SIGHUP")
        async for _ in signals:
            logger.info("reload.signal_received", signal="SIGHUP")
            try:
                await dispatcher.reload_all()
            except (discord.HTTPException, RuntimeError) as exc:
                logger.error(
                    "reload.sync_failed",
                    error=str(exc),
                    error_type=exc.__class__.__name__,
                )


async def run_bot(dispatcher: Dispatcher) -> None:
    try:
        await dispatcher.client.start()
        await dispatcher.on_ready()
        await _reload_on_sighup(dispatcher)
    finally:
        await dispatcher.client.close()

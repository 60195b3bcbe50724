"""Pycord bot wrapper exposing what the dispatcher needs from the platform."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any

import discord

from .logging import get_logger

logger = get_logger(__name__)

type InteractionHandler = Callable[[discord.Interaction], Awaitable[None]]


class BotClient:
    """Wrapper around a Pycord Bot whose command sync is driven externally."""

    def __init__(self, token: str, *, intents: discord.Intents | None = None) -> None:
        self._token = token
        self._intents = intents
        self._interaction_handler: InteractionHandler | None = None
        # Defer bot creation until inside async context
        self._bot: discord.Bot | None = None
        self._ready_event: asyncio.Event | None = None
        self._start_task: asyncio.Task[None] | None = None

    def _ensure_bot(self) -> discord.Bot:
        """Create the bot if not already created. Must be called from async context."""
        if self._bot is not None:
            return self._bot

        intents = self._intents or discord.Intents.default()
        # Pycord must not bulk-overwrite the commands we sync ourselves.
        self._bot = discord.Bot(intents=intents, auto_sync_commands=False)
        self._ready_event = asyncio.Event()

        @self._bot.event
        async def on_ready() -> None:
            assert self._ready_event is not None
            self._ready_event.set()

        @self._bot.event
        async def on_interaction(interaction: discord.Interaction) -> None:
            if self._interaction_handler is None:
                logger.debug("interaction.no_handler", interaction_id=interaction.id)
                return
            await self._interaction_handler(interaction)

        return self._bot

    @property
    def bot(self) -> discord.Bot:
        """Get the underlying Pycord bot. Creates it if needed."""
        return self._ensure_bot()

    @property
    def user(self) -> discord.ClientUser | None:
        if self._bot is None:
            return None
        return self._bot.user

    @property
    def application_id(self) -> int | None:
        if self._bot is None:
            return None
        return self._bot.application_id

    def set_interaction_handler(self, handler: InteractionHandler) -> None:
        self._interaction_handler = handler

    def add_listener(self, func: Callable[..., Awaitable[Any]], name: str | None = None) -> None:
        """Attach a raw gateway event listener, e.g. ``name="on_thread_create"``."""
        if name is None:
            self.bot.add_listener(func)
        else:
            self.bot.add_listener(func, name)

    def remove_listener(self, func: Callable[..., Awaitable[Any]], name: str | None = None) -> None:
        if self._bot is None:
            return
        if name is None:
            self._bot.remove_listener(func)
        else:
            self._bot.remove_listener(func, name)

    async def bulk_replace_commands(
        self,
        payload: list[dict[str, Any]],
        *,
        guild_id: int | None = None,
    ) -> list[dict[str, Any]]:
        """Replace every registered command in the scope with ``payload``."""
        bot = self._ensure_bot()
        application_id = bot.application_id
        if application_id is None:
            raise RuntimeError("Cannot sync commands before the bot is ready.")
        if guild_id is None:
            return await bot.http.bulk_upsert_global_commands(application_id, payload)
        return await bot.http.bulk_upsert_guild_commands(
            application_id, guild_id, payload
        )

    async def start(self) -> None:
        """Start the bot and wait until ready."""
        bot = self._ensure_bot()
        assert self._ready_event is not None

        async def _run_bot() -> None:
            try:
                await bot.start(self._token)
            except asyncio.CancelledError:
                pass
            except RuntimeError as e:
                # Suppress "Session is closed" error during shutdown
                if "Session is closed" not in str(e):
                    raise

        self._start_task = asyncio.create_task(_run_bot(), name="slashgate-bot-start")
        await self._ready_event.wait()

    async def close(self) -> None:
        if self._bot is not None:
            await self._bot.close()
            # Cancel the start task and wait for it to finish
            if self._start_task is not None and not self._start_task.done():
                self._start_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._start_task

    async def wait_until_ready(self) -> None:
        self._ensure_bot()
        assert self._ready_event is not None
        await self._ready_event.wait()

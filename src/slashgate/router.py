"""Interaction dispatch: command registry ownership, module loading, routing."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

import discord

from .commands import Command, CommandHandler
from .components import ComponentDefinition
from .errors import InvalidModuleError
from .interactions import (
    CHAT_INPUT,
    command_kind,
    command_name,
    component_command,
    send_notice,
    send_reply,
)
from .loader import ModuleDescriptor, ModuleSource, is_valid_module
from .logging import bind_interaction_context, clear_context, get_logger
from .permissions import actor_from_interaction, check_permission
from .registry import CommandRegistry
from .settings import DEFAULT_SUPPORT_URL

if TYPE_CHECKING:
    from types import ModuleType

    from .client import BotClient

logger = get_logger(__name__)

NOT_REGISTERED = (
    "Something went very wrong and the command is not registered. "
    "Please report this in the support server: <{support_url}>"
)
NO_COMPONENT_HANDLER = (
    "There is no handler registered for this component. "
    "Please report this in the support server: <{support_url}>"
)
UNKNOWN_INTERACTION = (
    "You did something the bot doesn't know about! "
    "Please report this in the support server: <{support_url}>"
)
NOT_IMPLEMENTED = "This kind of command is not implemented yet."
DM_NOT_ALLOWED = "This command may not be used in DMs."
NO_PERMISSION = "You do not have permissions to execute this command."
HANDLER_FAILED = "Something went wrong while running this command."

_UNSET = object()

type Listener = tuple[Callable[..., Awaitable[Any]], str | None]


class Dispatcher:
    """Routes inbound interactions to the commands registered by modules.

    Each instance owns its registry, so several bots can share a process.
    """

    def __init__(
        self,
        client: BotClient,
        source: ModuleSource,
        *,
        owners: Iterable[int] = (),
        guild_id: int | None = None,
        support_url: str = DEFAULT_SUPPORT_URL,
    ) -> None:
        self.client = client
        self.source = source
        self.owners = frozenset(owners)
        self.guild_id = guild_id
        self.support_url = support_url
        self.registry = CommandRegistry()
        self._loading: str | None = None
        self._registered_during_load: set[str] = set()
        self._listeners: dict[str, list[Listener]] = {}

    @staticmethod
    def new_command(name: str, description: str, handler: CommandHandler) -> Command:
        return Command(name, description, handler)

    @staticmethod
    def new_component(interaction: discord.Interaction) -> ComponentDefinition | None:
        """Start a component layout owned by the command behind ``interaction``."""
        if interaction.type == discord.InteractionType.application_command:
            name = command_name(interaction)
        elif interaction.type == discord.InteractionType.component:
            name = component_command(interaction)
        else:
            return None
        if not name:
            return None
        return ComponentDefinition(name)

    # registry

    def register_command(self, command: Command) -> None:
        self.registry.register(command, module=self._loading)
        if self._loading is not None:
            self._registered_during_load.add(command.name)
        logger.debug("command.registered", command=command.name, module=self._loading)

    def remove_command(self, *names: str) -> list[str]:
        """Drop whole commands by name; used when a reloaded module stops defining one."""
        removed = self.registry.remove(*names)
        if removed:
            logger.info("command.removed", commands=removed)
        return removed

    async def sync_commands(self, guild_id: int | None | object = _UNSET) -> None:
        scope = self.guild_id if guild_id is _UNSET else guild_id
        payload = self.registry.payload()
        await self.client.bulk_replace_commands(payload, guild_id=scope)
        logger.info(
            "commands.synced",
            guild_id=scope,
            count=len(payload),
            commands=[entry["name"] for entry in payload],
        )

    # listeners

    def add_listener(
        self, func: Callable[..., Awaitable[Any]], name: str | None = None
    ) -> None:
        """Attach a gateway listener; a reload detaches the ones its module added."""
        self.client.add_listener(func, name)
        if self._loading is not None:
            self._listeners.setdefault(self._loading, []).append((func, name))

    def _detach_listeners(self, module: str) -> list[Listener]:
        listeners = self._listeners.pop(module, [])
        for func, name in listeners:
            self.client.remove_listener(func, name)
        return listeners

    # modules

    def _run_init(self, name: str, module: ModuleType) -> set[str]:
        self._loading = name
        self._registered_during_load = set()
        try:
            module.init(self)
            return set(self._registered_during_load)
        finally:
            self._loading = None
            self._registered_during_load = set()

    def install_module(self, descriptor: ModuleDescriptor) -> set[str] | None:
        """Import one module and run its ``init``; None if it is not a module."""
        module = self.source.load(descriptor)
        if not is_valid_module(module):
            logger.debug("module.skipped", module=descriptor.name)
            return None
        registered = self._run_init(descriptor.name, module)
        logger.info("module.loaded", module=descriptor.name, commands=sorted(registered))
        return registered

    def load_modules(self) -> list[str]:
        from .builtins import reload_command

        loaded: list[str] = []
        for descriptor in self.source.enumerate():
            try:
                if self.install_module(descriptor) is not None:
                    loaded.append(descriptor.name)
            except Exception as exc:
                logger.exception(
                    "module.load_failed",
                    module=descriptor.name,
                    error=str(exc),
                    error_type=exc.__class__.__name__,
                )
        self.register_command(reload_command())
        return loaded

    async def reload_module(self, name: str) -> list[str]:
        """Re-import one module, drop commands it no longer defines and resync.

        Returns the names of the commands that were dropped.
        """
        descriptor = self.source.find(name)
        module = self.source.load(descriptor)
        if not is_valid_module(module):
            raise InvalidModuleError(f"Module {descriptor.name} does not define init()")
        previous = {
            owned: self.registry.get(owned)
            for owned in self.registry.owned_by(descriptor.name)
        }
        old_listeners = self._detach_listeners(descriptor.name)
        try:
            registered = self._run_init(descriptor.name, module)
        except Exception:
            self._restore_module(descriptor.name, previous, old_listeners)
            raise
        removed = self.remove_command(*sorted(previous.keys() - registered))
        logger.info(
            "module.reloaded",
            module=descriptor.name,
            commands=sorted(registered),
            removed=removed,
        )
        await self.sync_commands()
        return removed

    def _restore_module(
        self,
        name: str,
        commands: dict[str, Command | None],
        listeners: list[Listener],
    ) -> None:
        """Put back what a module had before its failed re-init."""
        self.registry.remove(*self.registry.owned_by(name))
        for command in commands.values():
            if command is not None:
                self.registry.register(command, module=name)
        self._detach_listeners(name)
        for func, event in listeners:
            self.client.add_listener(func, event)
        self._listeners[name] = list(listeners)
        logger.warning("module.reload_rolled_back", module=name, commands=sorted(commands))

    async def reload_all(self) -> list[str]:
        for module in list(self._listeners):
            self._detach_listeners(module)
        self.registry.clear()
        loaded = self.load_modules()
        await self.sync_commands()
        logger.info("modules.reloaded_all", modules=loaded)
        return loaded

    async def on_ready(self) -> None:
        loaded = self.load_modules()
        await self.sync_commands()
        user = self.client.user
        logger.info(
            "dispatcher.ready",
            user=str(user) if user is not None else None,
            modules=loaded,
            commands=self.registry.names(),
        )

    # routing

    async def handle_interaction(self, interaction: discord.Interaction) -> None:
        bind_interaction_context(
            interaction_id=interaction.id,
            user_id=interaction.user.id if interaction.user is not None else None,
        )
        try:
            if interaction.type == discord.InteractionType.application_command:
                if command_kind(interaction) == CHAT_INPUT:
                    await self._dispatch_command(interaction)
                else:
                    # TODO: route user/message context menu commands once Command can declare them
                    await send_notice(interaction, NOT_IMPLEMENTED)
            elif interaction.type == discord.InteractionType.component:
                await self._dispatch_component(interaction)
            elif interaction.type == discord.InteractionType.auto_complete:
                await self._dispatch_autocomplete(interaction)
            else:
                logger.warning("dispatch.unknown_interaction", kind=str(interaction.type))
                await send_notice(
                    interaction, UNKNOWN_INTERACTION.format(support_url=self.support_url)
                )
        finally:
            clear_context()

    async def _dispatch_command(self, interaction: discord.Interaction) -> None:
        name = command_name(interaction)
        command = self.registry.get(name) if name else None
        if command is None:
            logger.warning("dispatch.not_registered", command=name)
            await send_notice(interaction, NOT_REGISTERED.format(support_url=self.support_url))
            return

        actor = actor_from_interaction(interaction)
        if not command.dm_allowed and actor.in_dm:
            await send_notice(interaction, DM_NOT_ALLOWED)
            return
        if not check_permission(actor, command, self.owners):
            logger.debug(
                "dispatch.permission_denied",
                command=name,
                permission=command.permission.name,
            )
            await send_notice(interaction, NO_PERMISSION)
            return

        try:
            result = command.handler(interaction, self)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.exception(
                "dispatch.handler_failed",
                command=name,
                error=str(exc),
                error_type=exc.__class__.__name__,
            )
            await send_notice(interaction, HANDLER_FAILED)
            return
        try:
            await send_reply(interaction, result)
        except Exception as exc:
            logger.exception(
                "dispatch.reply_failed",
                command=name,
                error=str(exc),
                error_type=exc.__class__.__name__,
            )
            if not interaction.response.is_done():
                await send_notice(interaction, HANDLER_FAILED)

    async def _dispatch_component(self, interaction: discord.Interaction) -> None:
        name = component_command(interaction)
        command = self.registry.get(name) if name else None
        if command is None or command.component_handler is None:
            logger.warning("dispatch.no_component_handler", command=name)
            await send_notice(
                interaction, NO_COMPONENT_HANDLER.format(support_url=self.support_url)
            )
            return
        try:
            await command.component_handler(interaction, self)
        except Exception as exc:
            logger.exception(
                "dispatch.component_failed",
                command=name,
                error=str(exc),
                error_type=exc.__class__.__name__,
            )
            if not interaction.response.is_done():
                await send_notice(interaction, HANDLER_FAILED)

    async def _dispatch_autocomplete(self, interaction: discord.Interaction) -> None:
        name = command_name(interaction)
        command = self.registry.get(name) if name else None
        if command is None or command.autocomplete_handler is None:
            return
        try:
            await command.autocomplete_handler(interaction, self)
        except Exception as exc:
            logger.exception(
                "dispatch.autocomplete_failed",
                command=name,
                error=str(exc),
                error_type=exc.__class__.__name__,
            )

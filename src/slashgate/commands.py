"""Fluent builders for slash command topology.

A command holds either sublevels (groups and/or subcommands) or direct
parameters. Builders one level deeper hand control back to their parent on
``done()``, so a definition reads top-down:

    Command("config", "Bot settings", handle_config)
        .add_group("prefix", "Prefix settings")
            .add_subcommand("set", "Set the prefix")
                .add_parameter("value", "New prefix", OptionType.STRING)
                .done()
            .done()
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from .errors import CommandConfigError
from .options import OptionType, Parameter, make_parameter

if TYPE_CHECKING:
    import discord

    from .interactions import Reply
    from .router import Dispatcher

type CommandResult = Reply | str | Mapping[str, Any]
type CommandHandler = Callable[
    [discord.Interaction, Dispatcher], CommandResult | Awaitable[CommandResult]
]
type ComponentHandler = Callable[[discord.Interaction, Dispatcher], Awaitable[Any]]
type AutocompleteHandler = Callable[[discord.Interaction, Dispatcher], Awaitable[Any]]


class Permission(enum.Enum):
    EVERYONE = "everyone"
    ADMINISTRATOR = "administrator"
    OWNER = "owner"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Subcommand:
    name: str
    description: str
    parameters: tuple[Parameter, ...] = ()


@dataclass(frozen=True, slots=True)
class Group:
    name: str
    description: str
    subcommands: tuple[Subcommand, ...] = ()


class _SubcommandParent(Protocol):
    name: str

    def _attach_subcommand(self, subcommand: Subcommand) -> None: ...


P = TypeVar("P", bound=_SubcommandParent)


class SubcommandBuilder(Generic[P]):
    def __init__(self, name: str, description: str, parent: P) -> None:
        self.name = name
        self.description = description
        self._parent = parent
        self._parameters: list[Parameter] = []

    def add_parameter(
        self,
        name: str,
        description: str,
        type: OptionType | int,
        **options: Any,
    ) -> SubcommandBuilder[P]:
        self._parameters.append(
            make_parameter(
                name, description, type, command=_root_name(self._parent), **options
            )
        )
        return self

    def done(self) -> P:
        self._parent._attach_subcommand(
            Subcommand(self.name, self.description, tuple(self._parameters))
        )
        return self._parent


class GroupBuilder:
    def __init__(self, name: str, description: str, parent: Command) -> None:
        self.name = name
        self.description = description
        self._parent = parent
        self._subcommands: list[Subcommand] = []

    def add_subcommand(self, name: str, description: str) -> SubcommandBuilder[GroupBuilder]:
        return SubcommandBuilder(name, description, self)

    def _attach_subcommand(self, subcommand: Subcommand) -> None:
        self._subcommands.append(subcommand)

    def done(self) -> Command:
        self._parent._attach_group(
            Group(self.name, self.description, tuple(self._subcommands))
        )
        return self._parent


def _root_name(parent: _SubcommandParent) -> str:
    if isinstance(parent, GroupBuilder):
        return parent._parent.name
    return parent.name


class Command:
    """A top-level slash command and everything needed to route to it."""

    def __init__(self, name: str, description: str, handler: CommandHandler) -> None:
        self.name = name
        self.description = description
        self.handler = handler
        self.sublevels: list[Group | Subcommand] = []
        self.parameters: list[Parameter] = []
        self.permission = Permission.EVERYONE
        self.custom_permission: int | None = None
        self.dm_allowed = True
        self.component_handler: ComponentHandler | None = None
        self.autocomplete_handler: AutocompleteHandler | None = None

    def __repr__(self) -> str:
        return f"Command(name={self.name!r}, permission={self.permission.name})"

    @property
    def groups(self) -> list[Group]:
        return [node for node in self.sublevels if isinstance(node, Group)]

    @property
    def subcommands(self) -> list[Subcommand]:
        return [node for node in self.sublevels if isinstance(node, Subcommand)]

    @property
    def has_sublevels(self) -> bool:
        return bool(self.sublevels)

    def add_group(self, name: str, description: str) -> GroupBuilder:
        return GroupBuilder(name, description, self)

    def add_subcommand(self, name: str, description: str) -> SubcommandBuilder[Command]:
        return SubcommandBuilder(name, description, self)

    def add_parameter(
        self,
        name: str,
        description: str,
        type: OptionType | int,
        **options: Any,
    ) -> Command:
        self.parameters.append(
            make_parameter(name, description, type, command=self.name, **options)
        )
        return self

    def _attach_subcommand(self, subcommand: Subcommand) -> None:
        self.sublevels.append(subcommand)

    def _attach_group(self, group: Group) -> None:
        self.sublevels.append(group)

    def set_admin_only(self) -> Command:
        self.permission = Permission.ADMINISTRATOR
        self.custom_permission = None
        return self

    def set_owner_only(self) -> Command:
        self.permission = Permission.OWNER
        self.custom_permission = None
        return self

    def set_custom_permission(self, permission: int | discord.Permissions) -> Command:
        """Require any of the given permission bits (administrators always pass)."""
        self.permission = Permission.CUSTOM
        self.custom_permission = int(getattr(permission, "value", permission))
        return self

    def disable_dm(self) -> Command:
        self.dm_allowed = False
        return self

    def set_component_handler(self, handler: ComponentHandler) -> Command:
        self.component_handler = handler
        return self

    def set_autocomplete_handler(self, handler: AutocompleteHandler) -> Command:
        self.autocomplete_handler = handler
        return self

    def validate(self) -> None:
        if self.has_sublevels and self.parameters:
            raise CommandConfigError(
                self.name,
                "Both sublevels and parameters are defined directly under the "
                "slash command. This is not allowed!",
            )

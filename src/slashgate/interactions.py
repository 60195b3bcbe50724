"""Helpers for reading inbound interactions and replying to them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import discord

from .components import ComponentDefinition, parse_custom_id
from .options import OptionType

CHAT_INPUT = 1
USER_CONTEXT = 2
MESSAGE_CONTEXT = 3

_STRUCTURAL = (int(OptionType.SUB_COMMAND), int(OptionType.SUB_COMMAND_GROUP))


@dataclass(frozen=True, slots=True)
class Reply:
    """A chat reply; ``extra`` is forwarded verbatim to the send call (embeds, tts, ...)."""

    content: str | None
    ephemeral: bool = False
    components: ComponentDefinition | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Reply:
        extra = {key: value for key, value in data.items() if key not in _REPLY_FIELDS}
        return cls(
            content=data.get("content"),
            ephemeral=bool(data.get("ephemeral", False)),
            components=data.get("components"),
            extra=extra,
        )


_REPLY_FIELDS = frozenset({"content", "ephemeral", "components"})


def _data(interaction: discord.Interaction) -> dict[str, Any]:
    return interaction.data or {}


def command_name(interaction: discord.Interaction) -> str | None:
    return _data(interaction).get("name")


def command_kind(interaction: discord.Interaction) -> int:
    return int(_data(interaction).get("type", CHAT_INPUT))


def custom_id(interaction: discord.Interaction) -> str | None:
    return _data(interaction).get("custom_id")


def component_command(interaction: discord.Interaction) -> str | None:
    """Name of the command owning the component that was used."""
    value = custom_id(interaction)
    if not value:
        return None
    command, _ = parse_custom_id(value)
    return command


def _leaf_options(options: list[dict[str, Any]]) -> tuple[list[str], list[dict[str, Any]]]:
    path: list[str] = []
    while len(options) == 1 and options[0].get("type") in _STRUCTURAL:
        path.append(options[0]["name"])
        options = options[0].get("options", [])
    return path, options


def invoked_path(interaction: discord.Interaction) -> tuple[str, ...]:
    """Group/subcommand names under the invoked command, outermost first."""
    path, _ = _leaf_options(_data(interaction).get("options", []))
    return tuple(path)


def option_value(interaction: discord.Interaction, name: str, default: Any = None) -> Any:
    _, options = _leaf_options(_data(interaction).get("options", []))
    for option in options:
        if option.get("name") == name:
            return option.get("value", default)
    return default


def focused_option(interaction: discord.Interaction) -> tuple[str, Any] | None:
    """The option currently being typed in an autocomplete request."""
    _, options = _leaf_options(_data(interaction).get("options", []))
    for option in options:
        if option.get("focused"):
            return option["name"], option.get("value")
    return None


async def send_reply(
    interaction: discord.Interaction, reply: Reply | str | Mapping[str, Any]
) -> None:
    if isinstance(reply, str):
        reply = Reply(content=reply)
    elif isinstance(reply, Mapping):
        reply = Reply.from_mapping(reply)
    kwargs: dict[str, Any] = {
        **reply.extra,
        "content": reply.content,
        "ephemeral": reply.ephemeral,
    }
    if reply.components is not None and reply.components.rows:
        kwargs["view"] = reply.components.to_view()
    if interaction.response.is_done():
        await interaction.followup.send(**kwargs)
    else:
        await interaction.response.send_message(**kwargs)


async def send_notice(interaction: discord.Interaction, content: str) -> None:
    await send_reply(interaction, Reply(content=content, ephemeral=True))

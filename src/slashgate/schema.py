"""Convert command topology into the platform's bulk command payload."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .commands import Command, Group, Subcommand
from .options import OptionType, Parameter

type OptionPayload = dict[str, Any]
type CommandPayload = dict[str, Any]


def transform_parameter(param: Parameter) -> OptionPayload:
    option: OptionPayload = {
        "type": int(param.type),
        "name": param.name,
        "description": param.description,
        "required": param.required,
    }
    if param.choices:
        option["choices"] = [
            {"name": choice.name, "value": choice.value} for choice in param.choices
        ]
    if param.channel_types:
        option["channel_types"] = list(param.channel_types)
    if param.range is not None:
        # STRING bounds are lengths, the platform names them differently
        if param.type is OptionType.STRING:
            min_key, max_key = "min_length", "max_length"
        else:
            min_key, max_key = "min_value", "max_value"
        if param.range.min is not None:
            option[min_key] = param.range.min
        if param.range.max is not None:
            option[max_key] = param.range.max
    if param.autocomplete:
        option["autocomplete"] = True
    return option


def transform_subcommand(subcommand: Subcommand) -> OptionPayload:
    option: OptionPayload = {
        "type": int(OptionType.SUB_COMMAND),
        "name": subcommand.name,
        "description": subcommand.description,
    }
    if subcommand.parameters:
        option["options"] = [transform_parameter(p) for p in subcommand.parameters]
    return option


def transform_group(group: Group) -> OptionPayload:
    option: OptionPayload = {
        "type": int(OptionType.SUB_COMMAND_GROUP),
        "name": group.name,
        "description": group.description,
    }
    if group.subcommands:
        option["options"] = [transform_subcommand(s) for s in group.subcommands]
    return option


def transform_command(command: Command) -> CommandPayload:
    payload: CommandPayload = {
        "name": command.name,
        "description": command.description,
    }
    options: list[OptionPayload] = []
    for node in command.sublevels:
        if isinstance(node, Group):
            options.append(transform_group(node))
        else:
            options.append(transform_subcommand(node))
    options.extend(transform_parameter(param) for param in command.parameters)
    if options:
        payload["options"] = options
    return payload


def build_payload(commands: Iterable[Command]) -> list[CommandPayload]:
    return [transform_command(command) for command in commands]

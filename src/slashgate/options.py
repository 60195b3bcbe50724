"""Value objects describing a single slash command argument."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .errors import CommandConfigError

type ChoiceValue = str | int | float


class OptionType(enum.IntEnum):
    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


PRIMITIVE_TYPES = frozenset(OptionType) - {
    OptionType.SUB_COMMAND,
    OptionType.SUB_COMMAND_GROUP,
}


@dataclass(frozen=True, slots=True)
class Choice:
    name: str
    value: ChoiceValue


@dataclass(frozen=True, slots=True)
class Range:
    """Numeric bounds for INTEGER/NUMBER, length bounds for STRING."""

    min: float | None = None
    max: float | None = None


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    description: str
    type: OptionType
    required: bool = True
    choices: tuple[Choice, ...] = ()
    channel_types: tuple[int, ...] = ()
    range: Range | None = None
    autocomplete: bool = False


def _coerce_choice(choice: Choice | tuple[str, ChoiceValue] | Any) -> Choice:
    if isinstance(choice, Choice):
        return choice
    if isinstance(choice, tuple) and len(choice) == 2:
        return Choice(name=str(choice[0]), value=choice[1])
    # discord.OptionChoice and similar objects
    return Choice(name=choice.name, value=choice.value)


def _coerce_range(value: Range | tuple[float | None, float | None] | None) -> Range | None:
    if value is None or isinstance(value, Range):
        return value
    low, high = value
    return Range(min=low, max=high)


def make_parameter(
    name: str,
    description: str,
    type: OptionType | int,
    *,
    command: str,
    required: bool = True,
    choices: Iterable[Choice | tuple[str, ChoiceValue]] | None = None,
    channel_types: Iterable[Any] | None = None,
    range: Range | tuple[float | None, float | None] | None = None,
    autocomplete: bool = False,
) -> Parameter:
    """Build a Parameter, normalising loose inputs.

    ``channel_types`` accepts ints or ``discord.ChannelType`` members. Raises
    ``CommandConfigError`` for structural kinds used as a parameter type and
    for ``autocomplete`` combined with fixed choices.
    """
    option_type = OptionType(type)
    if option_type not in PRIMITIVE_TYPES:
        raise CommandConfigError(
            command, f"parameter {name} cannot use structural type {option_type.name}."
        )
    normalized_choices = tuple(_coerce_choice(c) for c in choices or ())
    if autocomplete and normalized_choices:
        raise CommandConfigError(
            command,
            f"parameter {name} defines both choices and autocomplete. This is not allowed!",
        )
    kinds = tuple(int(getattr(kind, "value", kind)) for kind in channel_types or ())
    return Parameter(
        name=name,
        description=description,
        type=option_type,
        required=required,
        choices=normalized_choices,
        channel_types=kinds,
        range=_coerce_range(range),
        autocomplete=autocomplete,
    )


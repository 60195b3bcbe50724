import discord
import pytest

from slashgate.errors import CommandConfigError
from slashgate.options import Choice, OptionType, Range, make_parameter


def test_parameter_defaults() -> None:
    param = make_parameter("query", "Search text", OptionType.STRING, command="search")
    assert param.required is True
    assert param.autocomplete is False
    assert param.choices == ()
    assert param.channel_types == ()
    assert param.range is None


def test_parameter_accepts_int_type() -> None:
    param = make_parameter("count", "How many", 4, command="roll")
    assert param.type is OptionType.INTEGER


def test_choices_from_tuples_keep_order() -> None:
    param = make_parameter(
        "size",
        "Pick a size",
        OptionType.STRING,
        command="order",
        choices=[("Small", "s"), Choice("Large", "l")],
    )
    assert param.choices == (Choice("Small", "s"), Choice("Large", "l"))


def test_range_from_tuple() -> None:
    param = make_parameter(
        "count", "How many", OptionType.INTEGER, command="roll", range=(1, 6)
    )
    assert param.range == Range(min=1, max=6)


def test_channel_types_accept_enum_members() -> None:
    param = make_parameter(
        "target",
        "Where",
        OptionType.CHANNEL,
        command="move",
        channel_types=[discord.ChannelType.text, 2],
    )
    assert param.channel_types == (0, 2)


def test_autocomplete_with_choices_is_rejected() -> None:
    with pytest.raises(CommandConfigError, match="order"):
        make_parameter(
            "size",
            "Pick a size",
            OptionType.STRING,
            command="order",
            choices=[("Small", "s")],
            autocomplete=True,
        )


def test_structural_type_is_rejected() -> None:
    with pytest.raises(CommandConfigError, match="structural"):
        make_parameter("nested", "Nope", OptionType.SUB_COMMAND, command="bad")

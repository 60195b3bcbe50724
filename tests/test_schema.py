from slashgate.commands import Command
from slashgate.options import OptionType
from slashgate.schema import build_payload, transform_command, transform_parameter
from slashgate.options import make_parameter


def _handler(interaction, dispatcher):
    return "ok"


def test_group_with_ping_subcommand() -> None:
    command = (
        Command("tools", "Tools", _handler)
        .add_group("net", "Network tools")
        .add_subcommand("ping", "Ping something")
        .done()
        .done()
    )
    payload = transform_command(command)
    assert payload["name"] == "tools"
    assert len(payload["options"]) == 1
    group = payload["options"][0]
    assert group["type"] == OptionType.SUB_COMMAND_GROUP
    assert group["name"] == "net"
    assert len(group["options"]) == 1
    assert group["options"][0]["type"] == OptionType.SUB_COMMAND
    assert group["options"][0]["name"] == "ping"


def test_command_without_options_has_no_options_key() -> None:
    payload = transform_command(Command("hello", "Say hello", _handler))
    assert payload == {"name": "hello", "description": "Say hello"}


def test_parameters_keep_insertion_order() -> None:
    command = (
        Command("search", "Search", _handler)
        .add_parameter("query", "Text", OptionType.STRING)
        .add_parameter("limit", "Max results", OptionType.INTEGER, required=False)
        .add_parameter("user", "Author", OptionType.USER, required=False)
    )
    options = transform_command(command)["options"]
    assert [o["name"] for o in options] == ["query", "limit", "user"]
    assert [o["required"] for o in options] == [True, False, False]


def test_groups_and_subcommands_keep_interleaved_order() -> None:
    command = (
        Command("admin", "Admin", _handler)
        .add_subcommand("status", "Status")
        .done()
        .add_group("users", "Users")
        .add_subcommand("ban", "Ban")
        .done()
        .done()
        .add_subcommand("restart", "Restart")
        .done()
    )
    options = transform_command(command)["options"]
    assert [o["name"] for o in options] == ["status", "users", "restart"]
    assert [o["type"] for o in options] == [1, 2, 1]


def test_subcommand_parameters_are_nested() -> None:
    command = (
        Command("tag", "Tags", _handler)
        .add_subcommand("add", "Add a tag")
        .add_parameter("name", "Tag name", OptionType.STRING)
        .add_parameter("pinned", "Pin it", OptionType.BOOLEAN, required=False)
        .done()
    )
    sub = transform_command(command)["options"][0]
    assert [o["name"] for o in sub["options"]] == ["name", "pinned"]
    assert sub["options"][1]["type"] == 5


def test_parameter_optional_fields() -> None:
    param = make_parameter(
        "amount",
        "Amount",
        OptionType.NUMBER,
        command="pay",
        choices=[("One", 1), ("Two", 2)],
        range=(0, 10),
    )
    option = transform_parameter(param)
    assert option == {
        "type": 10,
        "name": "amount",
        "description": "Amount",
        "required": True,
        "choices": [{"name": "One", "value": 1}, {"name": "Two", "value": 2}],
        "min_value": 0,
        "max_value": 10,
    }


def test_string_range_maps_to_length_bounds() -> None:
    param = make_parameter(
        "text", "Text", OptionType.STRING, command="say", range=(None, 200)
    )
    option = transform_parameter(param)
    assert option["max_length"] == 200
    assert "min_length" not in option
    assert "max_value" not in option


def test_channel_types_and_autocomplete() -> None:
    param = make_parameter(
        "where",
        "Channel",
        OptionType.CHANNEL,
        command="move",
        channel_types=[0, 5],
    )
    assert transform_parameter(param)["channel_types"] == [0, 5]
    auto = make_parameter(
        "city", "City", OptionType.STRING, command="weather", autocomplete=True
    )
    assert transform_parameter(auto)["autocomplete"] is True


def test_build_payload_maps_every_command() -> None:
    commands = [
        Command("a", "A", _handler),
        Command("b", "B", _handler),
    ]
    assert [entry["name"] for entry in build_payload(commands)] == ["a", "b"]

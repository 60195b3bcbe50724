"""Example command module: drop files like this into the configured modules_dir."""

from __future__ import annotations

import discord

from slashgate import Dispatcher, OptionType, Reply
from slashgate.components import parse_custom_id
from slashgate.interactions import custom_id, option_value
from slashgate.logging import get_logger

logger = get_logger(__name__)


def init(dispatcher: Dispatcher) -> None:
    dispatcher.register_command(
        Dispatcher.new_command("testcmd", "This is a test command", handle_testcmd)
    )
    dispatcher.register_command(
        Dispatcher.new_command("vote", "Start a yes/no vote", handle_vote)
        .add_parameter("question", "What to vote on", OptionType.STRING, range=(1, 200))
        .disable_dm()
        .set_component_handler(handle_vote_button)
    )
    dispatcher.add_listener(on_thread_create, "on_thread_create")


def handle_testcmd(interaction: discord.Interaction, dispatcher: Dispatcher) -> Reply:
    return Reply(
        f"this is a reply! interaction id {interaction.id}",
        ephemeral=True,
    )


def handle_vote(interaction: discord.Interaction, dispatcher: Dispatcher) -> Reply:
    components = Dispatcher.new_component(interaction)
    assert components is not None
    components.add_row().add_button(
        "yes", discord.ButtonStyle.success, label="Yes"
    ).add_button("no", discord.ButtonStyle.danger, label="No").done()
    question = option_value(interaction, "question", "?")
    return Reply(f"**Vote:** {question}", components=components)


async def handle_vote_button(interaction: discord.Interaction, dispatcher: Dispatcher) -> None:
    _, action = parse_custom_id(custom_id(interaction) or "")
    await interaction.response.send_message(f"You voted {action}.", ephemeral=True)


async def on_thread_create(thread: discord.Thread) -> None:
    logger.info("sample.thread_created", thread=thread.name)

"""Commands every dispatcher installs regardless of loaded modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from .commands import Command
from .errors import InvalidModuleError
from .interactions import Reply, option_value
from .logging import get_logger
from .options import OptionType

if TYPE_CHECKING:
    from .router import Dispatcher

logger = get_logger(__name__)

RELOAD_COMMAND = "reload"


def reload_command() -> Command:
    return (
        Command(RELOAD_COMMAND, "Reload a module.", handle_reload)
        .add_parameter("module", "The module to reload", OptionType.STRING)
        .set_owner_only()
    )


async def handle_reload(interaction: discord.Interaction, dispatcher: Dispatcher) -> Reply:
    requested = option_value(interaction, "module")
    if not requested:
        return Reply("Did not pass module name", ephemeral=True)

    try:
        dispatcher.source.find(requested)
        # Importing and syncing can outlast the initial response window.
        await interaction.response.defer(ephemeral=True)
        await dispatcher.reload_module(requested)
    except FileNotFoundError:
        return Reply(f"Could not find a module with the name `{requested}`.", ephemeral=True)
    except InvalidModuleError:
        return Reply(
            f"Requested module `{requested}` is not a valid module.", ephemeral=True
        )
    except discord.HTTPException as exc:
        logger.error("reload.sync_failed", module=requested, status=exc.status, error=str(exc))
        return Reply(f"Discord API error: {exc}", ephemeral=True)
    except Exception as exc:
        logger.exception("reload.failed", module=requested, error=str(exc))
        return Reply(
            f"Unspecified error {exc.__class__.__name__}: {exc}", ephemeral=True
        )
    return Reply(f"Refreshed and re-initialised module `{requested}`!", ephemeral=True)

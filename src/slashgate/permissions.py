"""Permission gate deciding whether an actor may run a command."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

import discord

from .commands import Command, Permission

ADMINISTRATOR = discord.Permissions(administrator=True).value


@dataclass(frozen=True, slots=True)
class Actor:
    user_id: int
    in_dm: bool
    permissions: int = 0


def actor_from_interaction(interaction: discord.Interaction) -> Actor:
    user = interaction.user
    user_id = user.id if user is not None else 0
    in_dm = interaction.guild_id is None
    permissions = 0
    # Channel permissions resolved by Discord for this interaction.
    if not in_dm and interaction.permissions is not None:
        permissions = interaction.permissions.value
    return Actor(user_id=user_id, in_dm=in_dm, permissions=permissions)


def is_owner(actor: Actor, owners: Collection[int]) -> bool:
    return actor.user_id in owners


def is_administrator(actor: Actor, owners: Collection[int]) -> bool:
    # DMs carry no guild roles, so the check is vacuously satisfied there.
    if is_owner(actor, owners) or actor.in_dm:
        return True
    return bool(actor.permissions & ADMINISTRATOR)


def has_custom_permission(
    actor: Actor, bits: int | None, owners: Collection[int]
) -> bool:
    if is_administrator(actor, owners):
        return True
    if not bits:
        return False
    return bool(actor.permissions & bits)


def check_permission(actor: Actor, command: Command, owners: Collection[int]) -> bool:
    permission = command.permission
    if permission is Permission.EVERYONE:
        return True
    if permission is Permission.OWNER:
        return is_owner(actor, owners)
    if permission is Permission.ADMINISTRATOR:
        return is_administrator(actor, owners)
    if permission is Permission.CUSTOM:
        return has_custom_permission(actor, command.custom_permission, owners)
    return False

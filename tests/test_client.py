"""Tests for the Pycord bot wrapper."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from slashgate.client import BotClient


class TestBotClientInitialization:
    def test_bot_is_created_lazily(self) -> None:
        client = BotClient("test-token")
        assert client._token == "test-token"
        assert client._bot is None
        assert client.user is None
        assert client.application_id is None

    def test_set_interaction_handler(self) -> None:
        client = BotClient("test-token")

        async def handler(interaction) -> None:
            pass

        client.set_interaction_handler(handler)
        assert client._interaction_handler is handler


class TestBulkReplaceCommands:
    @pytest.mark.anyio
    async def test_global_scope(self) -> None:
        client = BotClient("test-token")
        mock_bot = MagicMock()
        mock_bot.application_id = 77
        mock_bot.http.bulk_upsert_global_commands = AsyncMock(return_value=[])
        client._bot = mock_bot

        await client.bulk_replace_commands([{"name": "a", "description": "A"}])

        mock_bot.http.bulk_upsert_global_commands.assert_awaited_once_with(
            77, [{"name": "a", "description": "A"}]
        )

    @pytest.mark.anyio
    async def test_guild_scope(self) -> None:
        client = BotClient("test-token")
        mock_bot = MagicMock()
        mock_bot.application_id = 77
        mock_bot.http.bulk_upsert_guild_commands = AsyncMock(return_value=[])
        client._bot = mock_bot

        await client.bulk_replace_commands([], guild_id=5)

        mock_bot.http.bulk_upsert_guild_commands.assert_awaited_once_with(77, 5, [])

    @pytest.mark.anyio
    async def test_requires_application_id(self) -> None:
        client = BotClient("test-token")
        mock_bot = MagicMock()
        mock_bot.application_id = None
        client._bot = mock_bot

        with pytest.raises(RuntimeError, match="before the bot is ready"):
            await client.bulk_replace_commands([])


class TestListeners:
    def test_add_listener_forwards_name(self) -> None:
        client = BotClient("test-token")
        mock_bot = MagicMock()
        client._bot = mock_bot

        async def on_thread_create(thread) -> None:
            pass

        client.add_listener(on_thread_create, "on_thread_create")
        mock_bot.add_listener.assert_called_once_with(on_thread_create, "on_thread_create")

    @pytest.mark.anyio
    async def test_close_without_bot_does_nothing(self) -> None:
        client = BotClient("test-token")
        await client.close()
        assert client._bot is None

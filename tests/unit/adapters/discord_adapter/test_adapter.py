import pytest

from unittest.mock import AsyncMock, MagicMock, patch

from relay.adapters.discord_adapter.adapter import Adapter

class TestAdapter:
    """Tests for the Discord adapter lifecycle"""

    @pytest.fixture
    def outputs(self):
        output = MagicMock()
        output.name = "stdout"
        output.open = AsyncMock()
        output.close = AsyncMock()
        return [output]

    @pytest.fixture
    def client_mock(self):
        client = MagicMock()
        client.bot = MagicMock()
        client.connect = AsyncMock(return_value=True)
        client.disconnect = AsyncMock()
        client.connection_failed = MagicMock(return_value=False)
        return client

    @pytest.fixture
    def adapter(self, relay_config, outputs):
        return Adapter(relay_config, outputs, start_maintenance=False)

    @pytest.mark.asyncio
    async def test_start_and_stop(self, adapter, client_mock, outputs):
        with patch("relay.adapters.discord_adapter.adapter.Client", return_value=client_mock):
            await adapter.start()

            assert adapter.running is True
            assert adapter.cache is not None
            assert adapter.cache.provider.client is client_mock.bot
            outputs[0].open.assert_awaited_once()
            client_mock.connect.assert_awaited_once()

            adapter.cache.close = AsyncMock()
            await adapter.stop()

            assert adapter.running is False
            client_mock.disconnect.assert_awaited_once()
            adapter.cache.close.assert_awaited_once()
            outputs[0].close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_connection(self, adapter, client_mock):
        client_mock.connect.return_value = False

        with patch("relay.adapters.discord_adapter.adapter.Client", return_value=client_mock):
            await adapter.start()

        assert adapter.running is False
        await adapter.stop()

    @pytest.mark.asyncio
    async def test_failed_output_open(self, adapter, outputs, client_mock):
        outputs[0].open.side_effect = OSError("permission denied")

        with patch("relay.adapters.discord_adapter.adapter.Client", return_value=client_mock):
            await adapter.start()

        assert adapter.running is False
        client_mock.connect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_events_forwarded_to_processor(self, adapter):
        adapter.incoming_events_processor = MagicMock()
        adapter.incoming_events_processor.process_event = AsyncMock()
        event = {"type": "new_message", "event": MagicMock()}

        await adapter.process_incoming_event(event)

        adapter.incoming_events_processor.process_event.assert_awaited_once_with(event)

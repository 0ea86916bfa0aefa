import asyncio
import discord
import logging

from typing import Any, Dict, List, Optional

from relay.adapters.discord_adapter.client import Client
from relay.adapters.discord_adapter.event_processing.incoming_event_processor import IncomingEventProcessor
from relay.adapters.discord_adapter.provider import DiscordProvider
from relay.core.cache.cache import Cache
from relay.core.utils.config import Config
from relay.outputs.base_output import BaseOutput

class Adapter:
    """Relays Discord messages to the configured outputs"""
    ADAPTER_VERSION = "0.1.0"

    def __init__(self, config: Config, outputs: List[BaseOutput], start_maintenance: bool = True):
        """Initialize the Discord adapter

        Args:
            config: Config instance
            outputs: Outputs to relay messages to
            start_maintenance: Whether to start the attachment cache maintenance loop
        """
        self.config = config
        self.outputs = outputs
        self.start_maintenance = start_maintenance
        self.running = False
        self.client: Optional[Client] = None
        self.cache: Optional[Cache] = None
        self.incoming_events_processor: Optional[IncomingEventProcessor] = None
        self.monitoring_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Start the adapter"""
        logging.info("Starting adapter...")
        self.running = True

        try:
            await self._open_outputs()

            self.client = Client(self.config, self.process_incoming_event)
            self.cache = Cache(DiscordProvider(self.client.bot), self.config, self.start_maintenance)
            self.incoming_events_processor = IncomingEventProcessor(
                self.config, self.client.bot, self.cache, self.outputs
            )

            if await self.client.connect():
                self._print_api_compatibility()
                self.monitoring_task = asyncio.create_task(self._monitor_connection())
                logging.info("Adapter started successfully")
                return
        except Exception as e:
            logging.error(f"Error starting adapter: {e}", exc_info=True)

        self.running = False

    def _print_api_compatibility(self) -> None:
        """Print the API version"""
        logging.info(f"Adapter version {self.ADAPTER_VERSION}")
        logging.info(f"Discord.py library version: {discord.__version__}")

    async def _open_outputs(self) -> None:
        """Open every output, failing if any of them cannot be opened"""
        await asyncio.gather(*(output.open() for output in self.outputs))
        logging.info(f"Opened {len(self.outputs)} outputs")

    async def _monitor_connection(self) -> None:
        """Stop running when the Discord connection task ends"""
        check_interval = self.config.get_setting("adapter", "connection_check_interval", 5)

        while self.running:
            await asyncio.sleep(check_interval)

            if self.client and self.client.connection_failed():
                logging.error("Discord connection ended unexpectedly")
                self.running = False

    async def process_incoming_event(self, event: Dict[str, Any]) -> None:
        """Process an event from the Discord client

        Args:
            event: Event dictionary
        """
        if self.incoming_events_processor:
            await self.incoming_events_processor.process_event(event)

    async def stop(self) -> None:
        """Stop the adapter"""
        logging.info("Stopping adapter...")
        self.running = False

        if self.monitoring_task and not self.monitoring_task.done():
            self.monitoring_task.cancel()
            try:
                await self.monitoring_task
            except asyncio.CancelledError:
                pass  # Expected

        if self.client:
            await self.client.disconnect()
        if self.cache:
            await self.cache.close()

        for output in self.outputs:
            try:
                await output.close()
            except Exception as e:
                logging.error(f"Error closing output {output.name}: {e}")

        logging.info("Adapter stopped")

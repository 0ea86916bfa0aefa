import asyncio
import logging
import signal
import sys

from typing import List, Optional

from relay.adapters.discord_adapter.adapter import Adapter
from relay.core.utils.config import Config
from relay.core.utils.logger import setup_logging
from relay.outputs import BaseOutput, create_output

DEFAULT_CONFIG_PATH = "config/relay_config.yaml"

def load_config(config_path: str, token: Optional[str] = None) -> Config:
    """Load configuration and apply a command line token

    Args:
        config_path: Path to the YAML configuration
        token: Bot token overriding the configured one

    Returns:
        Config instance

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ValueError: If the configuration is invalid
    """
    config = Config(config_path)

    if token:
        config.adapter["bot_token"] = token
    if not config.get_setting("adapter", "bot_token"):
        raise ValueError("No bot token configured")

    return config

def build_outputs(config: Config) -> List[BaseOutput]:
    """Create the configured outputs, defaulting to a stdout writer"""
    definitions = config.get_outputs() or [{"type": "writer", "name": "stdout"}]
    return [create_output(definition) for definition in definitions]

async def main(config_path: str = DEFAULT_CONFIG_PATH, token: Optional[str] = None) -> int:
    adapter = None
    shutdown_event = asyncio.Event()

    def shutdown():
        """Perform graceful shutdown when signal is received"""
        logging.warning("Shutdown signal received, initiating shutdown...")
        shutdown_event.set()

    try:
        config = load_config(config_path, token)
        outputs = build_outputs(config)
        setup_logging(config)

        logging.info("Starting Discord relay")

        if sys.platform != "win32":
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, shutdown)
        else:
            signal.signal(signal.SIGINT, lambda s, f: shutdown())
            signal.signal(signal.SIGTERM, lambda s, f: shutdown())

        adapter = Adapter(config, outputs)
        await adapter.start()

        while adapter.running and not shutdown_event.is_set():
            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=10)
            except asyncio.TimeoutError:
                pass

        return 0 if shutdown_event.is_set() else 1
    except (ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}")
        print(f"Please ensure {config_path} exists with required settings")
        return 2
    finally:
        if adapter:
            await adapter.stop()

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

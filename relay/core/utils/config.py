import os
import yaml
import logging

from typing import Any, Dict, List

logger = logging.getLogger("Config")

class Config:
    def __init__(self, config_path: str = "config/relay_config.yaml"):
        """Initialize the configuration

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = config_path
        self.categories = [
            "adapter",
            "attachments",
            "logging"
        ]
        for category in self.categories:
            setattr(self, category, {})
        self.outputs: List[Dict[str, Any]] = []

        self.load_config()

    def load_config(self) -> None:
        """Load configuration from YAML file"""
        if os.path.exists(self.config_path):
            with open(self.config_path, "r") as file:
                config = yaml.safe_load(file) or {}
                for category in self.categories:
                    if category in config and isinstance(config[category], dict):
                        setattr(self, category, config[category])

                outputs = config.get("outputs") or []
                if not isinstance(outputs, list):
                    raise ValueError("Configuration category 'outputs' must be a list")
                self.outputs = outputs
        else:
            raise FileNotFoundError("Config file not found")

    def add_setting(self, category: str, key: str, value: Any) -> None:
        """Add a specific dynamic setting

        Args:
            category: Configuration category
            key: Setting key
            value: Value to add
        """
        if getattr(self, category, None) and key not in getattr(self, category):
            getattr(self, category)[key] = value
        else:
            raise ValueError(f"Invalid attempt to change configuration category: {category}")

    def get_setting(self, category: str, key: str, default=None) -> Any:
        """Get a specific setting

        Args:
            category: Configuration category
            key: Setting key
            default: Default value if key not found
        """
        try:
            return getattr(self, category).get(key, default)
        except (KeyError, AttributeError):
            if default is not None:
                return default
            raise ValueError(f"Setting '{key}' not found in configuration")

    def has_setting(self, category: str, key: str) -> bool:
        """Check if a setting exists

        Args:
            category: Configuration category
            key: Setting key
        """
        try:
            return key in getattr(self, category)
        except (KeyError, AttributeError, TypeError):
            return False

    def get_outputs(self) -> List[Dict[str, Any]]:
        """Get the list of output definitions"""
        return list(self.outputs)

    def get_token(self) -> str:
        """Get the bot token, used to redact it from logs"""
        return self.get_setting("adapter", "bot_token", "")

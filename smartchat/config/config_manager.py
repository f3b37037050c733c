"""
Configuration management for SmartChat.

Handles application settings (memory bounds, orchestration limits, model
provider, tool options) and encrypted storage for API credentials.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet


class ConfigManager:
    """
    Manages application configuration and settings.

    Provides secure storage for sensitive data like model and weather API keys.
    """

    def __init__(self, config_dir: str = "config") -> None:
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory for configuration files
        """
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.config_file = self.config_dir / "app_config.json"
        self.credentials_file = self.config_dir / "credentials.enc"
        self.key_file = self.config_dir / ".key"

        self.config: Dict[str, Any] = {}
        self.credentials: Dict[str, Any] = {}

        self._init_encryption()
        self.load_config()

    def _init_encryption(self) -> None:
        """Initialize encryption for credentials."""
        if self.key_file.exists():
            with open(self.key_file, 'rb') as f:
                self.encryption_key = f.read()
        else:
            self.encryption_key = Fernet.generate_key()
            with open(self.key_file, 'wb') as f:
                f.write(self.encryption_key)
            if os.name != 'nt':
                os.chmod(self.key_file, 0o600)

        self.cipher = Fernet(self.encryption_key)

    def load_config(self) -> None:
        """Load configuration from files."""
        if self.config_file.exists():
            with open(self.config_file, 'r') as f:
                stored = json.load(f)
            # Keys added in newer versions fall back to their defaults
            self.config = _deep_merge(self._get_default_config(), stored)
        else:
            self.config = self._get_default_config()
            self.save_config()

        if self.credentials_file.exists():
            with open(self.credentials_file, 'rb') as f:
                encrypted_data = f.read()
            decrypted_data = self.cipher.decrypt(encrypted_data)
            self.credentials = json.loads(decrypted_data.decode())

    def save_config(self) -> None:
        """Save configuration to file."""
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)

    def save_credentials(self) -> None:
        """Save encrypted credentials to file."""
        json_data = json.dumps(self.credentials).encode()
        encrypted_data = self.cipher.encrypt(json_data)

        with open(self.credentials_file, 'wb') as f:
            f.write(encrypted_data)

        if os.name != 'nt':
            os.chmod(self.credentials_file, 0o600)

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app_version": "0.1.0",
            "memory": {
                "max_history_size": 20,
                "max_message_age_hours": 24,
                "sweep_interval_minutes": 60,
                "sweep_enabled": True,
            },
            "orchestrator": {
                "max_iterations": 5,
            },
            "llm": {
                "provider": "gemini",  # "gemini" or "ollama"
                "gemini": {
                    "model": "gemini-2.5-flash",
                    "temperature": 0.7,
                    "api_key_env": "GOOGLE_API_KEY",
                },
                "ollama": {
                    "model": "llama3.2",
                    "base_url": "http://localhost:11434",
                },
            },
            "tools": {
                "time": {
                    "default_timezone": "Asia/Kolkata",
                },
                "weather": {
                    "api_key_env": "OPENWEATHER_API_KEY",
                    "timeout_seconds": 10,
                },
            },
            "api": {
                "host": "0.0.0.0",
                "port": 8080,
                "max_message_length": 2000,
            },
            "logging": {
                "level": "INFO",
                "log_dir": "logs",
                "max_file_size_mb": 10,
                "backup_count": 5,
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key (supports dot notation, e.g., "memory.max_history_size")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """
        Set configuration value.

        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
            save: Whether to save immediately
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

        if save:
            self.save_config()

    def get_credential(self, key: str) -> Optional[str]:
        """Get a decrypted credential, or None if not stored."""
        return self.credentials.get(key)

    def set_credential(self, key: str, value: str, save: bool = True) -> None:
        """
        Set encrypted credential.

        Args:
            key: Credential key
            value: Credential value
            save: Whether to save immediately
        """
        self.credentials[key] = value
        if save:
            self.save_credentials()

    def remove_credential(self, key: str, save: bool = True) -> bool:
        """
        Remove a credential.

        Returns:
            True if credential was removed
        """
        if key in self.credentials:
            del self.credentials[key]
            if save:
                self.save_credentials()
            return True
        return False

    def has_credential(self, key: str) -> bool:
        return key in self.credentials

    def get_api_key(self, credential_key: str, env_var: Optional[str] = None) -> Optional[str]:
        """
        Resolve an API key.

        The encrypted credential store wins over the environment so that a key
        entered through the application is not shadowed by a stale shell export.

        Args:
            credential_key: Key in the credential store (e.g. "gemini_api_key")
            env_var: Environment variable to fall back to

        Returns:
            The API key, or None if neither source provides one
        """
        value = self.get_credential(credential_key)
        if value:
            return value
        if env_var:
            return os.getenv(env_var) or None
        return None

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self.config = self._get_default_config()
        self.save_config()


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay ``override`` onto ``base`` and return the result."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[str] = None) -> ConfigManager:
    """
    Get global configuration manager instance.

    Args:
        config_dir: Directory used when the instance is first created

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_dir or "config")
    return _config_manager


def reset_config_manager() -> None:
    """Reset global configuration manager (mainly for testing)."""
    global _config_manager
    _config_manager = None

"""
Configuration Manager for the Social Network plugin
===================================================

Centralized configuration management with environment variable loading,
validation, and type safety for group caps, costs and request timing.
"""

import os
import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


@dataclass
class LoggingConfig:
    """Logging output configuration"""
    log_level: str = "INFO"
    debug_mode: bool = False
    log_file: Optional[str] = None


@dataclass
class FriendSettings:
    """Symmetric (friend) group settings"""
    maximum_friends: int = 0  # 0 = unlimited
    per_use_cost: float = 0.0


@dataclass
class ChildSettings:
    """Asymmetric (child/parent) group settings"""
    maximum_children: int = 0  # 0 = unlimited
    per_use_cost: float = 0.0


@dataclass
class RequestConfig:
    """Pending request lifetime and sweeping"""
    request_timeout_seconds: int = 86400  # 0 = requests never expire
    sweep_interval_seconds: int = 60
    sweep_enabled: bool = True


@dataclass
class StorageConfig:
    """Flat-file record storage"""
    data_dir: str = "data/social"
    persist: bool = True


class ConfigManager:
    """
    Centralized configuration manager with environment variable loading
    and runtime validation for all plugin settings.
    """
    
    def __init__(self, env_file_path: Optional[str] = None):
        """
        Initialize configuration manager.
        
        Args:
            env_file_path: Optional path to .env file for loading environment variables
        """
        self._env: Dict[str, str] = dict(os.environ)
        self._load_env_file(env_file_path)
        
        self.logging = self._load_logging_config()
        self.friend = self._load_friend_settings()
        self.child = self._load_child_settings()
        self.requests = self._load_request_config()
        self.storage = self._load_storage_config()
        
        self._validate_configuration()
        
        logger.info("Configuration loaded and validated successfully")
    
    def _load_env_file(self, env_file_path: Optional[str]) -> None:
        """Overlay values from a .env file if it exists"""
        env_path = Path(env_file_path) if env_file_path else Path(".env")
        
        if env_path.exists():
            values = dotenv_values(env_path)
            self._env.update({k: v for k, v in values.items() if v is not None})
            logger.info(f"Loaded environment variables from {env_path}")
    
    def _get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._env.get(key, default)
    
    def _get_env_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable with proper conversion"""
        value = self._get_env(key, str(default)).lower()
        return value in ('true', '1', 'yes', 'on')
    
    def _get_env_int(self, key: str, default: int) -> int:
        """Get integer environment variable with validation"""
        try:
            return int(self._get_env(key, str(default)))
        except ValueError:
            logger.warning(f"Invalid integer value for {key}, using default: {default}")
            return default
    
    def _get_env_float(self, key: str, default: float) -> float:
        """Get float environment variable with validation"""
        try:
            return float(self._get_env(key, str(default)))
        except ValueError:
            logger.warning(f"Invalid float value for {key}, using default: {default}")
            return default
    
    def _load_logging_config(self) -> LoggingConfig:
        return LoggingConfig(
            log_level=self._get_env("LOG_LEVEL", "INFO"),
            debug_mode=self._get_env_bool("DEBUG_MODE", False),
            log_file=self._get_env("LOG_FILE") or None
        )
    
    def _load_friend_settings(self) -> FriendSettings:
        return FriendSettings(
            maximum_friends=self._get_env_int("FRIEND_MAXIMUM", 0),
            per_use_cost=self._get_env_float("FRIEND_PER_USE_COST", 0.0)
        )
    
    def _load_child_settings(self) -> ChildSettings:
        return ChildSettings(
            maximum_children=self._get_env_int("CHILD_MAXIMUM", 0),
            per_use_cost=self._get_env_float("CHILD_PER_USE_COST", 0.0)
        )
    
    def _load_request_config(self) -> RequestConfig:
        return RequestConfig(
            request_timeout_seconds=self._get_env_int("REQUEST_TIMEOUT_SECONDS", 86400),
            sweep_interval_seconds=self._get_env_int("REQUEST_SWEEP_INTERVAL_SECONDS", 60),
            sweep_enabled=self._get_env_bool("REQUEST_SWEEP_ENABLED", True)
        )
    
    def _load_storage_config(self) -> StorageConfig:
        return StorageConfig(
            data_dir=self._get_env("STORAGE_DATA_DIR", "data/social"),
            persist=self._get_env_bool("STORAGE_PERSIST", True)
        )
    
    def _validate_configuration(self) -> None:
        """Validate configuration values for consistency and ranges"""
        errors = []
        
        if self.friend.maximum_friends < 0:
            errors.append("Friend maximum must be 0 (unlimited) or positive")
        if self.child.maximum_children < 0:
            errors.append("Child maximum must be 0 (unlimited) or positive")
        
        if self.friend.per_use_cost < 0 or self.child.per_use_cost < 0:
            errors.append("Per-use costs cannot be negative")
        
        if self.requests.request_timeout_seconds < 0:
            errors.append("Request timeout cannot be negative")
        if self.requests.sweep_interval_seconds <= 0:
            errors.append("Request sweep interval must be positive")
        
        if self.logging.log_level.upper() not in logging.getLevelNamesMapping():
            errors.append(f"Unknown log level '{self.logging.log_level}'")
        
        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            logger.error(error_msg)
            raise ValueError(error_msg)
    
    def get_summary(self) -> Dict[str, Any]:
        """Get configuration summary for logging and debugging"""
        return {
            "friend": {
                "maximum": self.friend.maximum_friends,
                "per_use_cost": self.friend.per_use_cost
            },
            "child": {
                "maximum": self.child.maximum_children,
                "per_use_cost": self.child.per_use_cost
            },
            "requests": {
                "timeout_seconds": self.requests.request_timeout_seconds,
                "sweep_interval_seconds": self.requests.sweep_interval_seconds
            },
            "storage": {
                "data_dir": self.storage.data_dir,
                "persist": self.storage.persist
            }
        }


# Global configuration instance (initialized on first use)
_config_instance: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.
    
    Returns:
        ConfigManager: The global configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = ConfigManager()
    return _config_instance


def init_config(env_file_path: Optional[str] = None) -> ConfigManager:
    """
    Initialize the global configuration instance with custom env file.
    
    Args:
        env_file_path: Optional path to .env file
        
    Returns:
        ConfigManager: The initialized configuration instance
    """
    global _config_instance
    _config_instance = ConfigManager(env_file_path)
    return _config_instance

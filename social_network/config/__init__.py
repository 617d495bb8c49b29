"""
Configuration management package for the Social Network plugin

Provides centralized configuration management with:
- Environment variable loading from .env files
- Runtime configuration validation 
- Type-safe configuration classes
- Global configuration access patterns

Usage:
    from social_network.config import get_config
    
    config = get_config()
    print(f"Friend cap: {config.friend.maximum_friends}")
"""

from .manager import (
    ConfigManager,
    LoggingConfig,
    FriendSettings,
    ChildSettings,
    RequestConfig,
    StorageConfig,
    get_config,
    init_config
)

__all__ = [
    "ConfigManager",
    "LoggingConfig",
    "FriendSettings",
    "ChildSettings",
    "RequestConfig",
    "StorageConfig",
    "get_config",
    "init_config"
]

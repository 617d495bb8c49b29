"""
Centralized logging configuration for the Social Network plugin
===============================================================

Provides standardized logging with:
- Consistent logger instances across all modules
- Structured JSON logging for production
- Correlation IDs grouping the log lines of one player action
- Configurable log levels and formats
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Optional
from contextvars import ContextVar
from pathlib import Path

from ..config import get_config
from ..utils import fast_json

# Context variable for correlation ID tracking
correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'message', 'exc_info',
    'exc_text', 'stack_info', 'correlation_id', 'taskName'
])


class CorrelationFilter(logging.Filter):
    """Add correlation ID to log records for action tracing"""
    
    def filter(self, record):
        record.correlation_id = correlation_id.get() or 'none'
        return True


class StructuredFormatter(logging.Formatter):
    """JSON structured logging formatter for production monitoring"""
    
    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'correlation_id': getattr(record, 'correlation_id', 'none')
        }
        
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)
        
        # Extra fields passed through logger.info(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value if isinstance(value, (str, int, float, bool, type(None))) else str(value)
        
        return fast_json.dumps(log_entry)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter for development"""
    
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green  
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }
    
    def format(self, record):
        corr_id = getattr(record, 'correlation_id', 'none')
        corr_display = f"[{corr_id[:8]}]" if corr_id != 'none' else ""
        
        color = self.COLORS.get(record.levelname, '')
        reset = self.COLORS['RESET']
        colored_level = f"{color}{record.levelname:8s}{reset}"
        
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]
        
        return f"{timestamp} {colored_level} {record.name:30s} {corr_display} {record.getMessage()}"


class LoggingManager:
    """
    Centralized logging configuration manager
    
    Handles:
    - Logger creation with consistent naming
    - Configuration from LoggingConfig
    - Correlation ID management for action tracing
    - Structured vs console output selection
    """
    
    def __init__(self):
        self.config = get_config()
        self.loggers: Dict[str, logging.Logger] = {}
        self._setup_root_logging()
    
    def _setup_root_logging(self):
        """Configure root logging with appropriate handlers and formatters"""
        settings = self.config.logging
        log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
        
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(log_level)
        
        correlation_filter = CorrelationFilter()
        
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        if settings.debug_mode:
            console_handler.setFormatter(ConsoleFormatter())
        else:
            console_handler.setFormatter(StructuredFormatter())
        console_handler.addFilter(correlation_filter)
        root_logger.addHandler(console_handler)
        
        if settings.log_file:
            log_path = Path(settings.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            
            # Always use structured format for file output
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(StructuredFormatter())
            file_handler.addFilter(correlation_filter)
            root_logger.addHandler(file_handler)
        
        logging.getLogger('asyncio').setLevel(logging.WARNING)
    
    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a standardized logger instance
        
        Args:
            name: Logger name (typically __name__ from calling module)
            
        Returns:
            Configured logger instance
        """
        if name not in self.loggers:
            self.loggers[name] = logging.getLogger(name)
        return self.loggers[name]
    
    def set_correlation_id(self, corr_id: Optional[str] = None) -> str:
        if corr_id is None:
            corr_id = str(uuid.uuid4())
        correlation_id.set(corr_id)
        return corr_id
    
    def clear_correlation_id(self):
        correlation_id.set(None)
    
    def get_correlation_id(self) -> Optional[str]:
        return correlation_id.get()


# Global logging manager instance
_logging_manager: Optional[LoggingManager] = None


def _get_manager() -> LoggingManager:
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def get_logger(name: str) -> logging.Logger:
    """
    Get a standardized logger instance
    
    Usage:
        from social_network.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Friend request sent")
    """
    return _get_manager().get_logger(name)


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """
    Set correlation ID for action tracing
    
    Args:
        corr_id: Optional correlation ID. If None, generates a new UUID
        
    Returns:
        The correlation ID that was set
    """
    return _get_manager().set_correlation_id(corr_id)


def clear_correlation_id():
    """Clear the current correlation ID"""
    if _logging_manager is not None:
        _logging_manager.clear_correlation_id()


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID"""
    if _logging_manager is not None:
        return _logging_manager.get_correlation_id()
    return None


@contextmanager
def player_action(player_name: str):
    """
    Tag every log line emitted while handling one player command.
    
    Usage:
        with player_action("Steve"):
            logger.info("Processing friend request")
    """
    old_id = get_correlation_id()
    set_correlation_id(f"{player_name.lower()}:{uuid.uuid4().hex[:8]}")
    try:
        yield
    finally:
        if old_id:
            set_correlation_id(old_id)
        else:
            clear_correlation_id()

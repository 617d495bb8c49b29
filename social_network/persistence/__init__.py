"""
Persistence layer for person records
"""

from .record_store import PersonStore

__all__ = ["PersonStore"]

"""
Utility modules
"""

from .fast_json import dumps, dumps_bytes, loads, JSONDecodeError

__all__ = ['dumps', 'dumps_bytes', 'loads', 'JSONDecodeError']

"""
Fast JSON utility module backed by orjson

Used by the flat-file record store and the structured log formatter.
"""

import orjson
from typing import Any, Union


JSONDecodeError = orjson.JSONDecodeError


def dumps(obj: Any) -> str:
    """
    Serialize to a JSON string.
    
    Args:
        obj: Object to serialize
    
    Returns:
        JSON string
    """
    return orjson.dumps(obj).decode('utf-8')


def dumps_bytes(obj: Any, pretty: bool = False) -> bytes:
    """Serialize to JSON bytes (orjson native format)"""
    option = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else None
    return orjson.dumps(obj, option=option)


def loads(s: Union[str, bytes]) -> Any:
    """
    Deserialize JSON from str or bytes.
    
    Args:
        s: JSON string or bytes to deserialize
    
    Returns:
        Parsed object
    """
    return orjson.loads(s)


__all__ = ['dumps', 'dumps_bytes', 'loads', 'JSONDecodeError']

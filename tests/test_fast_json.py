"""
Unit tests for social_network.utils.fast_json module
"""

import pytest

from social_network.utils.fast_json import dumps, dumps_bytes, loads, JSONDecodeError


class TestSerialization:
    """Test orjson-backed serialization"""

    def test_dumps_returns_str(self):
        result = dumps({"key": "value", "number": 42})

        assert isinstance(result, str)
        assert loads(result) == {"key": "value", "number": 42}

    def test_dumps_bytes_pretty_sorts_keys(self):
        result = dumps_bytes({"b": 1, "a": 2}, pretty=True)

        assert isinstance(result, bytes)
        assert result.index(b'"a"') < result.index(b'"b"')
        assert b"\n" in result

    def test_loads_accepts_bytes_and_str(self):
        assert loads(b'{"x": [1, 2]}') == loads('{"x": [1, 2]}') == {"x": [1, 2]}

    def test_invalid_json(self):
        with pytest.raises(JSONDecodeError):
            loads("{not json")

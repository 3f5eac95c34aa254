"""JSON serialization of success payloads.

Plain JSON types round-trip as themselves. When a dataclass ``payload_type``
is given, payloads are stored as ``asdict`` output and rebuilt with
``payload_type(**data)`` on read.

Usage:
    serializer = JsonSerializer(Forecast)
    data = serializer.serialize(forecast)
    forecast = serializer.deserialize(data)
"""

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Optional

from cacheserde.domain.interfaces.serializer import Serializer


class JsonSerializer(Serializer):
    """UTF-8 JSON serializer with optional dataclass reconstruction.

    Args:
        payload_type: Optional dataclass type of the success payload.
    """

    def __init__(self, payload_type: Optional[type] = None) -> None:
        if payload_type is not None and not is_dataclass(payload_type):
            raise TypeError(f"{payload_type} is not a dataclass")
        self.payload_type = payload_type

    def serialize(self, value: Any) -> bytes:
        if self.payload_type is not None:
            if not isinstance(value, self.payload_type):
                raise TypeError(f"Expected {self.payload_type.__name__}, got {type(value).__name__}")
            value = asdict(value)
        _check_round_trip(value)
        return json.dumps(value).encode("utf-8")

    def deserialize(self, data: bytes) -> Any:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        raw = json.loads(data.decode("utf-8"))
        if self.payload_type is None:
            return raw
        if not isinstance(raw, dict):
            raise ValueError(f"Expected a JSON object for {self.payload_type.__name__}")
        return self.payload_type(**raw)


def _check_round_trip(value: Any) -> None:
    """Rejects values that JSON would silently change on the way back.

    Tuples decode as lists and non-string dict keys decode as strings, so a
    hit would return something different from the miss that stored it.

    Raises:
        TypeError: If the value contains a tuple or a non-string dict key.
    """
    if isinstance(value, tuple):
        raise TypeError("tuples do not survive a JSON round-trip; use a list")
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"dict key {key!r} is not a string and would decode as one")
            _check_round_trip(item)
    elif isinstance(value, list):
        for item in value:
            _check_round_trip(item)

"""Interface for encoding success payloads to and from stored bytes."""

import abc
from typing import Any


class Serializer(abc.ABC):
    """Abstract Base Class for payload serialization."""

    @abc.abstractmethod
    def serialize(self, value: Any) -> bytes:
        """Converts a success payload into bytes for storage.

        Raises:
            TypeError, ValueError: If the value cannot be encoded.
        """
        pass

    @abc.abstractmethod
    def deserialize(self, data: bytes) -> Any:
        """Converts stored bytes back into a success payload.

        Raises:
            ValueError: If the bytes are not a valid encoding.
        """
        pass

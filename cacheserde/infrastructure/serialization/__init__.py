"""Payload serializers implementing the Serializer interface."""

from cacheserde.infrastructure.serialization.json_serializer import JsonSerializer

__all__ = ["JsonSerializer"]

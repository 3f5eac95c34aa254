"""Domain Events emitted by the cache engine.

Bounded Context: Cache Management
"""

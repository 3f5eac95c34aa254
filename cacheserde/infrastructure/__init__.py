"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the cache engine to the outside world (file systems, encodings,
configuration sources, logging) by implementing the interfaces defined in
the domain layer.
"""

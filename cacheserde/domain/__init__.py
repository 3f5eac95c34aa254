"""Domain Layer: value objects, outcome types, errors, events and ports.

Nothing in this package performs I/O. The core engine depends only on the
abstractions declared here.
"""

"""Core Layer: the cache engine protocol and the wrapping mechanism.

Orchestrates the read / compute / write protocol against the domain
interfaces; concrete storage and encoding are injected.
"""

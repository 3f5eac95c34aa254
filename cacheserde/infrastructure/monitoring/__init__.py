"""Logging setup for applications using cacheserde."""

"""Configuration loading for cacheserde."""

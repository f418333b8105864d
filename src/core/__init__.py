"""Core: domain models, contracts, configuration and services.

The Core never prints; it hands results to callbacks supplied by the CLI.
"""

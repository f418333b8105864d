"""Adapters to the outside world (whois process, progress log, HTTP)."""

"""Adapters connecting the domain ports to external services."""

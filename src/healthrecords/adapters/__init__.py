"""Adapters connecting the core to storage backends."""

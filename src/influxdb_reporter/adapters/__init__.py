"""Adapters connecting the reporter core to concrete infrastructure."""

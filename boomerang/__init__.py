"""Boomerang: run a list of commands on many machines over SSH, concurrently."""

__version__ = "0.5.0"

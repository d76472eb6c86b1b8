"""Thieves sharing houses and fences through Lamport-clock mutual exclusion."""

__version__ = "0.1.0"
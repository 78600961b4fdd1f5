"""
Record types served by the store
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """A fetchable user record."""

    id: str
    name: str
    email: str

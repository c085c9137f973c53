"""Strongly typed identifiers for linkauth domain entities.

Using NewType for strong typing prevents mixing up user and account IDs.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
AccountId = NewType("AccountId", UUID)

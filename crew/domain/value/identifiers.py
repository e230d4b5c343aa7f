"""Strongly typed identifiers for Crew domain entities.

Using NewType keeps user, group and event IDs from being mixed up.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
GroupId = NewType("GroupId", UUID)
EventId = NewType("EventId", UUID)
FunScoreId = NewType("FunScoreId", UUID)

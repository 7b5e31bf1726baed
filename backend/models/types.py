"""Shared type definitions for type checking.

Uses NewType for IDs to provide compile-time type safety - prevents mixing
different ID types (e.g., passing RecipientID where WorkItemID expected).

Uses TypeAlias for complex types that are purely structural.
"""

from typing import NewType, TypeAlias

# ID types using NewType for type safety
WorkItemID = NewType("WorkItemID", str)
RecipientID = NewType("RecipientID", str)
LogicalEventID = NewType("LogicalEventID", str)

# Structural aliases using TypeAlias
TimeOfDay: TypeAlias = str  # HH:MM, 24h clock
Weekday: TypeAlias = int  # 0 = Monday ... 6 = Sunday

"""
Query base class.

Queries represent requests for information without side effects beyond
lazy reconciliation (e.g. materialising a full hearts row on first read).
They are named descriptively: GetHearts, GetDueCards, etc.

Example:
    @dataclass(frozen=True)
    class GetDueCards(Query):
        user_id: int
        limit: int = 20
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Query:
    """
    Base class for Queries.

    Queries are:
    - Immutable (frozen dataclass)
    - Named descriptively (GetTotalXp, GetStrugglingCards)
    - Carry filter/limit parameters
    """

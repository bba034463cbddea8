from .hearts_state_mapper import HeartsStateMapper
from .xp_transaction_mapper import XpTransactionMapper

__all__ = ["HeartsStateMapper", "XpTransactionMapper"]

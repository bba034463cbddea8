from .hearts_state import HeartsState
from .xp_transaction import XpSource, XpTransaction

__all__ = ["HeartsState", "XpSource", "XpTransaction"]

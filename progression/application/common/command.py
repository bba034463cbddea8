"""
Command base class.

Commands represent intentions to change the system state.
They are named in imperative form: DebitHearts, SubmitReview, etc.

Example:
    @dataclass(frozen=True)
    class DebitHearts(Command):
        user_id: int
        path_id: int
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """
    Base class for Commands.

    Commands are:
    - Immutable (frozen dataclass)
    - Named in imperative form (RefillHearts, not HeartsRefill)
    - Carry all data needed to execute the operation
    - Handled inside a single Unit of Work

    Raw ids are validated into value objects by the handler, so a bad id
    becomes a VALIDATION_ERROR rather than a crash.
    """

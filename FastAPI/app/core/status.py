from enum import Enum


class MatchStatus(str, Enum):
    DRAFTED = "DRAFTED"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    APPLIED = "APPLIED"
    SUBMITTED = "SUBMITTED"
    SKIPPED = "SKIPPED"


ACTIONABLE_STATUSES = frozenset({MatchStatus.DRAFTED, MatchStatus.NEEDS_REVIEW})
TERMINAL_STATUSES = frozenset({MatchStatus.APPLIED, MatchStatus.SUBMITTED, MatchStatus.SKIPPED})


def is_terminal(status: MatchStatus | str) -> bool:
    return MatchStatus(status) in TERMINAL_STATUSES


def is_actionable(status: MatchStatus | str) -> bool:
    return MatchStatus(status) in ACTIONABLE_STATUSES

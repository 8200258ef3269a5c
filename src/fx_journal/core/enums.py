"""Enumerations used across the journal."""

from enum import Enum


class Action(str, Enum):
    """Log entry kind, keyed by the broker's header token."""

    OPEN = "open"
    CLOSE = "close"

    @classmethod
    def from_token(cls, token: str) -> "Action":
        return _ACTION_TOKENS[token]


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

    @property
    def opposite(self) -> "Side":
        return Side.SELL if self is Side.BUY else Side.BUY

    @property
    def sign(self) -> int:
        return 1 if self is Side.BUY else -1

    @classmethod
    def from_token(cls, token: str) -> "Side":
        return _SIDE_TOKENS[token]


class GoalStatus(str, Enum):
    ACHIEVED = "achieved"
    UNREACHABLE = "unreachable"
    PROJECTED = "projected"


class ReportPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# Broker export tokens
OPEN_TOKEN = "新規"
CLOSE_TOKEN = "決済"
BUY_TOKEN = "買"
SELL_TOKEN = "売"

_ACTION_TOKENS = {OPEN_TOKEN: Action.OPEN, CLOSE_TOKEN: Action.CLOSE}
_SIDE_TOKENS = {BUY_TOKEN: Side.BUY, SELL_TOKEN: Side.SELL}

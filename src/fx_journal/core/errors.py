"""Custom exception hierarchy for the journal.

Parsing never raises: malformed log text is reported through
``ParseResult.errors``.  These exceptions cover the layers around the
parser (configuration, storage, ledger editing).
"""


class JournalError(Exception):
    """Base exception for all journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Storage ---
class StorageError(JournalError):
    """Ledger or snapshot persistence error."""


class LedgerCorruptError(StorageError):
    """The ledger file exists but cannot be decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Ledger file {path} is unreadable: {reason}")


class SnapshotNotFoundError(StorageError):
    """No daily snapshot stored for the requested date."""


# --- Editing ---
class SelectionError(JournalError):
    """Identity keys given for tagging / deletion match no ledger trade."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Unknown trade keys: {', '.join(missing)}")


# --- Discipline ---
class CooldownActiveError(JournalError):
    """A losing-streak cooldown is running; new trades are not accepted."""

    def __init__(self, until):
        self.until = until
        super().__init__(f"Cooldown active until {until:%H:%M:%S}; import refused")

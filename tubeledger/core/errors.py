"""Exception hierarchy for the ledger.

Validation rejections are not errors: they surface as a plain ``False`` from
the store. Everything here is either a caller mistake (bad identifiers), an
upstream failure (bridge) or a consistency violation in storage.
"""


class LedgerError(Exception):
    """Base class for all ledger errors."""


class KeyCodecError(LedgerError, ValueError):
    """An identifier cannot be encoded into a composite key."""


class IdentifierTooLong(KeyCodecError):
    def __init__(self, encoded_length: int, capacity: int):
        self.encoded_length = encoded_length
        self.capacity = capacity
        super().__init__(
            f"Composite key needs {encoded_length} bytes but capacity is {capacity}"
        )


class InvalidIdentifier(KeyCodecError):
    pass


class CorruptRecordError(LedgerError):
    """A stored value could not be decoded into an AchievementRecord."""


class BridgeError(LedgerError):
    """The external minting bridge rejected or failed a call."""


class SchemaVersionError(LedgerError):
    """The database was written by a newer schema than this code supports."""

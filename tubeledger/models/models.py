"""
Data models for the achievement ledger.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tubeledger.core.errors import CorruptRecordError

# Version tag written into every stored record payload
RECORD_FORMAT_VERSION = 1

# Placeholders for fields the ledger does not persist
HISTORY_PLACEHOLDER_NAME = "Achievement"
HISTORY_PLACEHOLDER_VISITS = 0
HISTORY_PLACEHOLDER_WALLET = ""

# Stored payload fields and their JSON types
_PAYLOAD_FIELDS = (
    ("achievement_id", str),
    ("user_id", str),
    ("unlocked_at", str),
    ("verified", bool),
)

@dataclass
class AchievementSubmission:
    """Caller-supplied achievement data checked before an unlock is recorded"""
    user_id: str
    achievement_id: str
    achievement_name: str
    required_visits: int
    current_visits: int
    timestamp: str
    wallet_address: str = ""

    def criteria_met(self) -> bool:
        return self.current_visits >= self.required_visits

@dataclass(frozen=True)
class AchievementRecord:
    """A verified unlock as persisted in the ledger"""
    achievement_id: str
    user_id: str
    unlocked_at: str
    verified: bool = True

    @classmethod
    def from_submission(cls, submission: AchievementSubmission) -> "AchievementRecord":
        return cls(
            achievement_id=submission.achievement_id,
            user_id=submission.user_id,
            unlocked_at=submission.timestamp,
            verified=True,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "v": RECORD_FORMAT_VERSION,
            "achievement_id": self.achievement_id,
            "user_id": self.user_id,
            "unlocked_at": self.unlocked_at,
            "verified": self.verified,
        }

    @classmethod
    def from_payload(cls, payload: Any) -> "AchievementRecord":
        if not isinstance(payload, dict):
            raise CorruptRecordError(f"Stored record is not an object: {payload!r}")
        version = payload.get("v")
        if isinstance(version, bool) or version != RECORD_FORMAT_VERSION:
            raise CorruptRecordError(f"Unsupported record format version: {version!r}")
        for name, expected in _PAYLOAD_FIELDS:
            if name not in payload:
                raise CorruptRecordError(f"Stored record missing field {name!r}")
            if not isinstance(payload[name], expected):
                raise CorruptRecordError(
                    f"Stored record field {name!r} should be {expected.__name__}, got {type(payload[name]).__name__}"
                )
        return cls(
            achievement_id=payload["achievement_id"],
            user_id=payload["user_id"],
            unlocked_at=payload["unlocked_at"],
            verified=payload["verified"],
        )

    def to_history(self) -> AchievementSubmission:
        """Reshape into submission form.

        Only ids and the unlock time are stored, so name, visit counts and
        wallet come back as placeholders.
        """
        return AchievementSubmission(
            user_id=self.user_id,
            achievement_id=self.achievement_id,
            achievement_name=HISTORY_PLACEHOLDER_NAME,
            required_visits=HISTORY_PLACEHOLDER_VISITS,
            current_visits=HISTORY_PLACEHOLDER_VISITS,
            timestamp=self.unlocked_at,
            wallet_address=HISTORY_PLACEHOLDER_WALLET,
        )

@dataclass
class Attribute:
    trait_type: str
    value: str

@dataclass
class AchievementMetadata:
    """Token metadata forwarded to the minting bridge"""
    name: str
    symbol: str
    description: str
    image: str = ""
    attributes: List[Attribute] = field(default_factory=list)

@dataclass
class MintingRequest:
    achievement_data: AchievementSubmission
    metadata: AchievementMetadata

@dataclass
class MintingResponse:
    success: bool
    token_mint: Optional[str] = None
    transaction_signature: Optional[str] = None
    error: Optional[str] = None

# ---- Bridge payloads ----

@dataclass
class AchievementMintingRequest:
    achievement_id: str
    user_wallet: str
    metadata_uri: str

@dataclass
class SolanaTransaction:
    instruction: bytes
    recent_blockhash: str
    fee_payer: str

@dataclass
class SolanaResponse:
    success: bool
    signature: Optional[str] = None
    error: Optional[str] = None

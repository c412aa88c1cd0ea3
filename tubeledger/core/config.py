"""
Configuration settings for the achievement ledger service.
"""
import os

class Settings:
    """Application settings"""

    # Composite key settings
    KEY_CAPACITY: int = int(os.getenv("KEY_CAPACITY", "64"))  # Fixed key width in bytes
    KEY_SEPARATOR: str = ":"
    # Reject oversized / ambiguous identifiers instead of truncating them
    KEY_STRICT: bool = os.getenv("KEY_STRICT", "true").lower() == "true"

    # Minting
    TOKEN_SYMBOL: str = os.getenv("TOKEN_SYMBOL", "TUBE_ACH")
    METADATA_URI_SCHEME: str = "tubeledger"
    MOCK_BALANCE_LAMPORTS: int = 1_000_000

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # --- Persistence (env overridable) ---
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/ledger.db")
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_POOL_MAX_OVERFLOW: int = int(os.getenv("DB_POOL_MAX_OVERFLOW", "10"))

# Global settings instance
settings = Settings()

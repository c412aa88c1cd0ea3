#!/usr/bin/env python3
"""
Run the achievement ledger development server
"""
import uvicorn

from tubeledger.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "tubeledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )

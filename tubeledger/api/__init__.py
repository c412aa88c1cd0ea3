"""
API package exports.
"""
from .routes import create_api_router

__all__ = [
    "create_api_router"
]

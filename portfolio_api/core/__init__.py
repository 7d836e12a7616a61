"""
Portfolio API - Core Package
============================

Core business logic, models, and schemas.
"""

from portfolio_api.core.config import settings
from portfolio_api.core.database import Base, get_db

__all__ = ["Base", "get_db", "settings"]

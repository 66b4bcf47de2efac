"""API adapters for external data sources.

Available adapters:
- balldontlie_adapter: balldontlie.io NBA API client
"""
from app.services.sync.adapters.balldontlie_adapter import BallDontLieClient

__all__ = ["BallDontLieClient"]

"""
NBA Data Sync Service

Imports teams, games and box scores from the balldontlie API into the local
store as read-only ``nba`` league rows.

Key components:
- Mapper: one field-mapping function per entity
- Adapters: balldontlie HTTP client
- Orchestrator: runs the sync steps and reports their outcome
"""
from app.services.sync.orchestrator import NbaSyncOrchestrator

__all__ = ["NbaSyncOrchestrator"]

#!/usr/bin/env python3
"""
Import NBA data from balldontlie.

Runs the same steps as POST /api/v1/nba/sync without the HTTP layer, for
cron jobs and first-time setup.

Usage:
    # Full sync (teams, games of the last 7 days, box scores)
    python scripts/sync_nba_data.py

    # Only games of the last 3 days
    python scripts/sync_nba_data.py --step games --lookback-days 3

    # Box scores of a single game
    python scripts/sync_nba_data.py --step stats --game-id 15908

Requires NBA_API_KEY.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings
from app.core.database import SessionLocal, init_db
from app.core.exceptions import NotFoundError
from app.services.sync.adapters.balldontlie_adapter import BallDontLieClient
from app.services.sync.orchestrator import NbaSyncOrchestrator

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import NBA data from balldontlie")
    parser.add_argument("--step", choices=["all", "teams", "games", "stats"], default="all")
    parser.add_argument("--lookback-days", type=int, default=settings.NBA_SYNC_LOOKBACK_DAYS)
    parser.add_argument("--game-id", type=int, help="balldontlie game id (required for --step stats)")
    args = parser.parse_args()
    if args.step == "stats" and args.game_id is None:
        parser.error("--game-id is required with --step stats")
    return args


def main() -> int:
    args = parse_args()
    if not settings.NBA_API_KEY:
        logger.error("NBA_API_KEY is not configured")
        return 2

    init_db()
    db = SessionLocal()
    try:
        with BallDontLieClient() as client:
            orchestrator = NbaSyncOrchestrator(db, client=client)
            if args.step == "teams":
                result = orchestrator.sync_teams()
            elif args.step == "games":
                result = orchestrator.sync_games(lookback_days=args.lookback_days)
            elif args.step == "stats":
                result = orchestrator.sync_game_stats(args.game_id)
            else:
                result = orchestrator.sync_all(lookback_days=args.lookback_days)
    except NotFoundError as e:
        logger.error(e.message)
        return 1
    finally:
        db.close()

    print(json.dumps(result, indent=2))
    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())

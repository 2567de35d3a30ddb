"""
Presence sweep runner
Marks offline the users whose browser vanished without calling /api/users/offline.

Run once from a shell or a system cron: python mark_users_offline.py [--minutes 5]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from app import listeners, mercure  # noqa: F401,E402
from app.config import PRESENCE_OFFLINE_THRESHOLD_MINUTES  # noqa: E402
from app.database import SessionLocal  # noqa: E402
from app.services.presence_service import mark_stale_users_offline  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Mark stale online users offline")
    parser.add_argument(
        "--minutes",
        type=int,
        default=PRESENCE_OFFLINE_THRESHOLD_MINUTES,
        help="Users whose lastSeen is older than this are switched offline",
    )
    args = parser.parse_args()

    db = SessionLocal()
    try:
        count = mark_stale_users_offline(db, args.minutes)
        asyncio.run(mercure.hub.publish_all(mercure.take_committed_updates(db)))
        logger.info(f"✅ {count} users marked offline")
        return 0
    except Exception as e:
        logger.error(f"❌ Presence sweep failed: {e}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

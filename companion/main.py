import argparse
import asyncio
import json
import sys
from typing import Optional

from companion.config import Config
from companion.database.database import Database
from companion.services.friends import FriendService
from companion.services.home_state import HomeStateCoordinator
from companion.services.match_history_service import MatchHistoryService
from companion.services.profile import ProfileService
from companion.services.session import SessionService
from companion.utils.logger import setup_logger

logger = setup_logger('companion')


def build_coordinator(db: Database, viewer_id: int, enrichment_concurrency: Optional[int] = None) -> HomeStateCoordinator:
    """Wire the database-backed providers into a started coordinator"""
    session_factory = db.session_factory
    return HomeStateCoordinator(
        profile_provider=ProfileService(session_factory, viewer_id),
        friend_provider=FriendService(session_factory, viewer_id),
        match_provider=MatchHistoryService(session_factory, viewer_id),
        session_provider=SessionService(session_factory, viewer_id),
        enrichment_concurrency=enrichment_concurrency
    )


async def watch_snapshots(coordinator: HomeStateCoordinator):
    """Log every snapshot until cancelled"""
    async for snapshot in coordinator.subscribe():
        logger.info(
            f"Snapshot: profile_loading={snapshot.profile_loading} "
            f"matches_loading={snapshot.matches_loading} "
            f"friends={snapshot.friend_count} matches={snapshot.match_count} "
            f"error={snapshot.last_error!r}"
        )


async def run(logout: bool = False) -> int:
    Config.validate()
    
    db = Database()
    await db.initialize()
    
    coordinator = build_coordinator(db, Config.VIEWER_PLAYER_ID)
    watcher = asyncio.create_task(watch_snapshots(coordinator))
    
    try:
        await coordinator.wait_idle()
        
        if logout:
            coordinator.logout()
            await coordinator.wait_idle()
        
        print(json.dumps(coordinator.snapshot.to_dict(), indent=2, ensure_ascii=False))
        return 1 if coordinator.snapshot.last_error else 0
    finally:
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)
        await coordinator.close()
        await db.close()


def main():
    parser = argparse.ArgumentParser(description="Load the companion home screen state for the configured viewer")
    parser.add_argument('--logout', action='store_true', help="End the viewer's session after loading")
    args = parser.parse_args()
    
    try:
        sys.exit(asyncio.run(run(logout=args.logout)))
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == '__main__':
    main()

"""
Match History Service for the home screen

Provides the viewer's past games newest first and the per-game role lookup
used to enrich each entry before display.
"""

from typing import List
from sqlalchemy import select, desc
from sqlalchemy.exc import SQLAlchemyError

from companion.constants import DisplayFormats
from companion.data_models.home import RawMatch
from companion.database.models import Game, GameParticipant
from companion.services.base import BaseService
from companion.utils.exceptions import ProviderError
from companion.utils.result import Failure, Result, Success
import logging

logger = logging.getLogger(__name__)


def format_duration(total_seconds: int) -> str:
    """Format a duration in seconds as MM:SS (minutes are not capped at 59)."""
    minutes, seconds = divmod(max(total_seconds or 0, 0), 60)
    return DisplayFormats.DURATION.format(minutes=minutes, seconds=seconds)


class MatchHistoryService(BaseService):
    """Match history provider backed by games and their participants"""
    
    MAX_HISTORY_LIMIT = 100
    
    def __init__(self, session_factory, viewer_id: int, limit: int = MAX_HISTORY_LIMIT):
        super().__init__(session_factory, viewer_id)
        self.limit = min(limit, self.MAX_HISTORY_LIMIT)
    
    async def fetch_all(self) -> Result[List[RawMatch]]:
        """Fetch the viewer's games, newest first, with the raw stored role."""
        try:
            async with self.get_session() as session:
                query = (
                    select(Game, GameParticipant.role)
                    .join(GameParticipant, GameParticipant.game_id == Game.id)
                    .where(GameParticipant.player_id == self.viewer_id)
                    .order_by(desc(Game.played_at), desc(Game.id))
                    .limit(self.limit)
                )
                result = await session.execute(query)
                
                return Success([
                    RawMatch(
                        id=game.id,
                        date=game.played_at.strftime(DisplayFormats.MATCH_DATE),
                        duration=format_duration(game.duration_seconds),
                        role=role
                    )
                    for game, role in result.all()
                ])
                
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching match history for player {self.viewer_id}: {e}")
            return Failure.from_exception(e)
    
    async def enrich(self, match_id: int) -> Result[bool]:
        """Check whether the viewer was the murderer in the given game."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(Game.murderer_id).where(Game.id == match_id)
                )
                row = result.first()
                
                if row is None:
                    raise ProviderError(f"Game {match_id} not found")
                
                return Success(row.murderer_id == self.viewer_id)
                
        except ProviderError as e:
            logger.debug(str(e))
            return Failure.from_exception(e)
        except SQLAlchemyError as e:
            logger.error(f"Database error resolving role in game {match_id}: {e}")
            return Failure.from_exception(e)

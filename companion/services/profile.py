"""
Profile service for the home screen.

Reads the signed-in viewer's nickname, avatar and coin balance.
"""

import logging
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from companion.data_models.home import Profile
from companion.database.models import Player
from companion.services.base import BaseService
from companion.utils.exceptions import PlayerNotFoundError
from companion.utils.result import Failure, Result, Success

logger = logging.getLogger(__name__)


class ProfileService(BaseService):
    """Profile provider backed by the players table."""
    
    async def fetch(self) -> Result[Profile]:
        """Fetch the viewer's profile."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(Player).where(Player.id == self.viewer_id, Player.is_active == True)
                )
                player = result.scalar_one_or_none()
                
                if not player:
                    raise PlayerNotFoundError(self.viewer_id)
                
                return Success(Profile(
                    nickname=player.nickname,
                    profile_image_url=player.profile_image_url,
                    coins=player.coins or 0
                ))
                
        except PlayerNotFoundError as e:
            logger.warning(str(e))
            return Failure.from_exception(e)
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching profile for player {self.viewer_id}: {e}")
            return Failure.from_exception(e)

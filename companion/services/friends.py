"""
Friend list service for the home screen.
"""

import logging
from typing import List
from sqlalchemy import select, or_
from sqlalchemy.exc import SQLAlchemyError

from companion.data_models.home import Friend
from companion.database.models import Friendship, FriendshipStatus, Player
from companion.services.base import BaseService
from companion.utils.result import Failure, Result, Success

logger = logging.getLogger(__name__)


class FriendService(BaseService):
    """Friend list provider backed by accepted friendships in either direction."""
    
    async def fetch(self) -> Result[List[Friend]]:
        try:
            async with self.get_session() as session:
                query = (
                    select(Friendship.requester_id, Friendship.addressee_id)
                    .where(
                        Friendship.status == FriendshipStatus.ACCEPTED,
                        or_(
                            Friendship.requester_id == self.viewer_id,
                            Friendship.addressee_id == self.viewer_id
                        )
                    )
                )
                rows = (await session.execute(query)).all()
                
                friend_ids = [
                    row.addressee_id if row.requester_id == self.viewer_id else row.requester_id
                    for row in rows
                ]
                if not friend_ids:
                    return Success([])
                
                players_result = await session.execute(
                    select(Player.id, Player.nickname)
                    .where(Player.id.in_(friend_ids))
                    .order_by(Player.nickname)
                )
                return Success([
                    Friend(player_id=row.id, nickname=row.nickname)
                    for row in players_result
                ])
                
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching friends for player {self.viewer_id}: {e}")
            return Failure.from_exception(e)

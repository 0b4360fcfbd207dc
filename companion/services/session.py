"""
Session service: ends the viewer's session by revoking their active tokens.
"""

import logging
from datetime import datetime, timezone
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from companion.database.models import SessionToken
from companion.services.base import BaseService
from companion.utils.exceptions import SessionEndError

logger = logging.getLogger(__name__)


class SessionService(BaseService):
    """Session provider backed by the session_tokens table."""
    
    async def end_session(self) -> None:
        """
        Revoke every active token of the viewer.
        
        Raises:
            SessionEndError: If the tokens could not be revoked
        """
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    update(SessionToken)
                    .where(
                        SessionToken.player_id == self.viewer_id,
                        SessionToken.revoked_at.is_(None)
                    )
                    .values(revoked_at=datetime.now(timezone.utc).replace(tzinfo=None))
                )
                logger.info(f"Revoked {result.rowcount} session token(s) for player {self.viewer_id}")
        except SQLAlchemyError as e:
            logger.error(f"Database error ending session for player {self.viewer_id}: {e}")
            raise SessionEndError(str(e)) from e

"""
Base service class for the companion data providers.

Provides async database session management for all provider implementations.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for all services with async database session management."""
    
    def __init__(self, session_factory, viewer_id: int):
        """
        Initialize base service with session factory.
        
        Args:
            session_factory: Async session factory from Database class
            viewer_id: Player id of the signed-in viewer
        """
        self.session_factory = session_factory
        self.viewer_id = viewer_id
    
    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for async database operations."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

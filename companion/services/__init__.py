"""
Services package for the companion home screen.

Data providers backed by the database, the snapshot store and the home state
coordinator that ties them together.
"""

from .base import BaseService
from .snapshot_store import SnapshotStore
from .home_state import HomeStateCoordinator

__all__ = ['BaseService', 'SnapshotStore', 'HomeStateCoordinator']

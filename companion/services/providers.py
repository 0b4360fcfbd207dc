"""
Data provider contracts consumed by the home state coordinator.

Every fetch is a single-shot coroutine returning a Success or a Failure.
Session termination is the exception: it returns nothing and raises on failure.
"""

from typing import List, Protocol

from companion.data_models.home import Friend, Profile, RawMatch
from companion.utils.result import Result


class ProfileProvider(Protocol):
    async def fetch(self) -> Result[Profile]:
        ...


class FriendListProvider(Protocol):
    async def fetch(self) -> Result[List[Friend]]:
        ...


class MatchHistoryProvider(Protocol):
    async def fetch_all(self) -> Result[List[RawMatch]]:
        """Fetch the viewer's matches in display order."""
        ...

    async def enrich(self, match_id: int) -> Result[bool]:
        """Return True when the viewer held the murderer role in the match."""
        ...


class SessionProvider(Protocol):
    async def end_session(self) -> None:
        ...

"""
Home state coordinator.

Loads the three home screen sections (profile, friends, match history) as
independent tasks and merges each result into the shared SnapshotStore. A
section that fails records its message in ``last_error`` and leaves the other
sections alone. Match history is loaded in two phases: the bulk fetch, then a
role lookup per match that defaults to the innocent label when it fails.
"""

import asyncio
import logging
from dataclasses import replace
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Set

from companion.config import Config
from companion.constants import RoleLabels
from companion.data_models.home import HomeSnapshot, Match, RawMatch
from companion.services.providers import (
    FriendListProvider, MatchHistoryProvider, ProfileProvider, SessionProvider
)
from companion.services.snapshot_store import SnapshotStore
from companion.utils.exceptions import (
    FriendFetchFailure, MatchFetchFailure, ProfileFetchFailure, SessionEndFailure
)
from companion.utils.result import Failure, Result, Success

logger = logging.getLogger(__name__)


class HomeStateCoordinator:
    """Orchestrates the home screen fetch paths and owns their snapshot store."""

    def __init__(
        self,
        profile_provider: ProfileProvider,
        friend_provider: FriendListProvider,
        match_provider: MatchHistoryProvider,
        session_provider: SessionProvider,
        store: Optional[SnapshotStore] = None,
        enrichment_concurrency: Optional[int] = None,
        autostart: bool = True
    ):
        """
        Args:
            profile_provider: Source of the viewer's profile
            friend_provider: Source of the viewer's friend list
            match_provider: Source of match history and per-match role lookups
            session_provider: Ends the viewer's session on logout
            store: Snapshot store to publish into (a fresh one by default)
            enrichment_concurrency: Max role lookups in flight, 1 = one at a time
            autostart: Call start() right away; requires a running event loop
        """
        self.profile_provider = profile_provider
        self.friend_provider = friend_provider
        self.match_provider = match_provider
        self.session_provider = session_provider
        self.store = store if store is not None else SnapshotStore()

        if enrichment_concurrency is None:
            enrichment_concurrency = Config.MATCH_ENRICHMENT_CONCURRENCY
        if enrichment_concurrency < 1:
            raise ValueError("enrichment_concurrency must be at least 1")
        self.enrichment_concurrency = enrichment_concurrency

        self._tasks: Set[asyncio.Task] = set()
        self._started = False
        self._closed = False
        self._refresh_count = 0

        if autostart:
            self.start()

    # Observation

    @property
    def snapshot(self) -> HomeSnapshot:
        return self.store.current()

    def subscribe(self) -> AsyncIterator[HomeSnapshot]:
        return self.store.subscribe()

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    # Actions

    def start(self):
        """Run the initial load. Only the first successful call has an effect."""
        if self._started:
            logger.debug("Home state coordinator already started")
            return
        self.refresh()
        self._started = True

    def refresh(self):
        """
        Relaunch all three fetch paths and return immediately.

        Must be called on the event loop thread. Work from an earlier refresh
        that is still in flight is not cancelled; each section ends up with
        whichever load finishes last.
        """
        if self._closed:
            logger.warning("Ignoring refresh on a closed home state coordinator")
            return

        # Raises RuntimeError before anything is scheduled when no loop is running
        asyncio.get_running_loop()

        self._refresh_count += 1
        logger.info(f"Refreshing home data (refresh #{self._refresh_count})")

        self._spawn(self._load_profile, "home-profile")
        self._spawn(self._load_friends, "home-friends")
        self._spawn(self._load_matches, "home-matches")

    def logout(self):
        """End the viewer's session in the background. Failures land in last_error."""
        if self._closed:
            logger.warning("Ignoring logout on a closed home state coordinator")
            return
        self._spawn(self._end_session, "home-logout")

    async def wait_idle(self):
        """Wait until every scheduled fetch (including ones scheduled meanwhile) is done."""
        while self._tasks:
            await asyncio.wait(set(self._tasks))

    async def close(self):
        """Cancel in-flight work. The snapshot is discarded with the coordinator."""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(f"Home state coordinator closed ({len(tasks)} task(s) cancelled)")

    # Fetch paths

    async def _load_profile(self):
        self.store.update(lambda s: replace(s, profile_loading=True))

        result = await self._call(self.profile_provider.fetch)

        if isinstance(result, Success):
            try:
                profile = result.data
                fields = {
                    'display_name': profile.nickname,
                    'avatar_ref': profile.profile_image_url,
                    'coin_balance': profile.coins,
                }
            except Exception as e:
                logger.error(f"Malformed profile payload {result.data!r}: {e}")
                result = Failure.from_exception(e)

        if isinstance(result, Success):
            self.store.update(lambda s: replace(s, profile_loading=False, **fields))
            logger.debug(f"Profile loaded for {fields['display_name']}")
        else:
            failure = ProfileFetchFailure(result.message)
            logger.warning(str(failure))
            self.store.update(lambda s: replace(
                s, profile_loading=False, last_error=failure.user_message
            ))

    async def _load_friends(self):
        result = await self._call(self.friend_provider.fetch)

        if isinstance(result, Success):
            try:
                friend_count = len(result.data)
            except Exception as e:
                logger.error(f"Malformed friend list payload {result.data!r}: {e}")
                result = Failure.from_exception(e)

        if isinstance(result, Success):
            self.store.update(lambda s: replace(s, friend_count=friend_count))
            logger.debug(f"Friend list loaded ({friend_count} friends)")
        else:
            # friend_count keeps its previous value
            failure = FriendFetchFailure(result.message)
            logger.warning(str(failure))
            self.store.update(lambda s: replace(s, last_error=failure.user_message))

    async def _load_matches(self):
        self.store.update(lambda s: replace(s, matches_loading=True))

        result = await self._call(self.match_provider.fetch_all)

        if isinstance(result, Success):
            try:
                matches = tuple(await self._enrich_matches(result.data))
            except Exception as e:
                logger.error(f"Malformed match history payload {result.data!r}: {e}")
                result = Failure.from_exception(e)

        if not isinstance(result, Success):
            failure = MatchFetchFailure(result.message)
            logger.warning(str(failure))
            self.store.update(lambda s: replace(
                s, matches_loading=False, last_error=failure.user_message
            ))
            return

        self.store.update(lambda s: replace(
            s,
            matches=matches,
            match_count=len(matches),
            matches_loading=False
        ))
        logger.debug(f"Match history loaded ({len(matches)} matches)")

    async def _end_session(self):
        try:
            await self.session_provider.end_session()
        except Exception as e:
            failure = SessionEndFailure(str(e) or e.__class__.__name__)
            logger.warning(str(failure))
            self.store.update(lambda s: replace(s, last_error=failure.user_message))
        else:
            logger.info("Session ended")

    # Enrichment

    async def _enrich_matches(self, raw_matches: List[RawMatch]) -> List[Match]:
        """Resolve the role of every match, keeping the input order."""
        if self.enrichment_concurrency == 1:
            return [await self._enrich_match(raw) for raw in raw_matches]

        semaphore = asyncio.Semaphore(self.enrichment_concurrency)

        async def bounded(raw: RawMatch) -> Match:
            async with semaphore:
                return await self._enrich_match(raw)

        # gather returns results in argument order regardless of completion order
        return list(await asyncio.gather(*(bounded(raw) for raw in raw_matches)))

    async def _enrich_match(self, raw: RawMatch) -> Match:
        result = await self._call(self.match_provider.enrich, raw.id)

        if isinstance(result, Success):
            was_murderer = bool(result.data)
        else:
            logger.debug(f"Role lookup failed for match {raw.id}, defaulting to innocent: {result.message}")
            was_murderer = False

        return Match.from_raw(raw, RoleLabels.for_classification(was_murderer))

    # Plumbing

    async def _call(self, operation: Callable[..., Awaitable[Result]], *args) -> Result:
        """Await a provider call, turning a raised exception into a Failure."""
        try:
            result = await operation(*args)
        except Exception as e:
            logger.error(f"{getattr(operation, '__qualname__', operation)} raised instead of returning a result: {e}")
            return Failure.from_exception(e)

        if not isinstance(result, (Success, Failure)):
            return Failure(f"Unexpected provider result: {result!r}")
        return result

    def _spawn(self, path: Callable[[], Awaitable[None]], name: str) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        task = loop.create_task(path(), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Task {task.get_name()} failed", exc_info=task.exception())

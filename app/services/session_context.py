import itertools
from typing import Awaitable, Dict, Optional, Tuple, TypeVar

from app.core.errors import StaleSessionError
from app.core.logger import logger
from app.models.db_models import AuthUser
from app.services.db_service import db_service

T = TypeVar("T")

# (global generation, per-user generation)
Snapshot = Tuple[int, int]


class SessionContext:
    """
    Process-wide view of the identity boundary.

    `start()` subscribes to Supabase auth state changes and `stop()` drops the
    subscription; both run from the application lifespan. Every session change
    (sign in, sign out, token refresh) bumps a generation counter, and
    `guarded()` discards results of fetches that were started before the most
    recent change for the same user. Per-user generations are only kept while
    that user has a guarded fetch in flight, so idle users cost nothing.
    """

    def __init__(self, db=None):
        self.db = db or db_service
        self._global_generation = 0
        # Fresh values come from one monotonic counter, so a dropped and re-added
        # user never gets back a generation an older snapshot still holds
        self._counter = itertools.count(1)
        self._user_generations: Dict[str, int] = {}
        self._in_flight: Dict[str, int] = {}
        self._subscription = None

    @property
    def started(self) -> bool:
        return self._subscription is not None

    async def start(self):
        client = await self.db.get_client()
        if not client:
            logger.warning("⚠️ Session context started without Supabase, auth events disabled")
            return
        self._subscription = client.auth.on_auth_state_change(self._on_auth_event)
        logger.info("👂 Subscribed to auth state changes")

    async def stop(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            logger.info("🔕 Unsubscribed from auth state changes")

    def _on_auth_event(self, event, session):
        user = getattr(session, "user", None) if session else None
        self.notify(str(event), getattr(user, "id", None))

    def notify(self, event: str, user_id: Optional[str] = None):
        """Records a session change. Without a user id every session is superseded."""
        if user_id:
            if user_id in self._user_generations:
                self._user_generations[user_id] = next(self._counter)
        else:
            self._global_generation += 1
        logger.info(f"🔑 Session change '{event}' (user={user_id or 'all'})")

    def snapshot(self, user_id: str) -> Snapshot:
        return (self._global_generation, self._user_generations.get(user_id, 0))

    def is_current(self, user_id: str, snapshot: Snapshot) -> bool:
        return self.snapshot(user_id) == snapshot

    @property
    def tracked_users(self) -> int:
        return len(self._user_generations)

    def _track(self, user_id: str):
        if user_id not in self._user_generations:
            self._user_generations[user_id] = next(self._counter)
        self._in_flight[user_id] = self._in_flight.get(user_id, 0) + 1

    def _release(self, user_id: str):
        remaining = self._in_flight[user_id] - 1
        if remaining:
            self._in_flight[user_id] = remaining
        else:
            del self._in_flight[user_id]
            del self._user_generations[user_id]

    async def guarded(self, user_id: str, pending: Awaitable[T]) -> T:
        self._track(user_id)
        snapshot = self.snapshot(user_id)
        try:
            result = await pending
            stale = not self.is_current(user_id, snapshot)
        finally:
            self._release(user_id)
        if stale:
            logger.info(f"🗑️ Dropping response for user {user_id}, session changed while it was in flight")
            raise StaleSessionError()
        return result

    async def current_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        if not access_token:
            return None
        data = await self.db.get_user(access_token)
        return AuthUser(**data) if data else None

    async def sign_out(self, access_token: str, user_id: str):
        await self.db.sign_out(access_token)
        self.notify("SIGNED_OUT", user_id)


session_context = SessionContext()

from typing import Callable, List, Optional
from supabase import create_async_client, AsyncClient, AuthApiError
from app.core.config import settings
from app.core.errors import RemoteCallError
import logging

logger = logging.getLogger("app")

BOOKING_WITH_SERVICE = "*, services(name, turnaround_days)"


class DBService:
    """
    Thin gateway over the Supabase tables (`services`, `bookings`, `profiles`,
    `user_roles`) and Supabase auth. Every failure is logged here and re-raised
    as RemoteCallError so callers can show a generic message.
    """
    _instance = None
    _client: AsyncClient = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(DBService, cls).__new__(cls)
            # Async client is created lazily on first use
        return cls._instance

    async def get_client(self) -> Optional[AsyncClient]:
        if not self._client:
            try:
                if settings.SUPABASE_URL and settings.SUPABASE_KEY:
                    self._client = await create_async_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
                    logger.info("✅ Supabase Async client initialized")
                else:
                    logger.warning("⚠️ Supabase credentials missing")
            except Exception as e:
                logger.error(f"❌ Failed to initialize Supabase Async: {e}")
        return self._client

    async def _require_client(self) -> AsyncClient:
        client = await self.get_client()
        if not client:
            raise RemoteCallError()
        return client

    async def _run(self, label: str, build: Callable):
        """Executes one query built by `build(client)` and returns `response.data`."""
        client = await self._require_client()
        try:
            response = await build(client).execute()
        except Exception as e:
            logger.error(f"❌ DB Error ({label}): {e}")
            raise RemoteCallError() from e
        return response.data

    # --- Auth ---

    async def get_user(self, access_token: str) -> Optional[dict]:
        """Resolves an access token to `{'id', 'email'}`. Invalid or expired tokens give None."""
        client = await self._require_client()
        try:
            response = await client.auth.get_user(access_token)
        except AuthApiError as e:
            logger.info(f"🔒 Rejected access token: {e}")
            return None
        except Exception as e:
            logger.error(f"❌ Auth Error (get_user): {e}")
            raise RemoteCallError() from e

        if not response or not response.user:
            return None
        return {'id': response.user.id, 'email': response.user.email}

    async def sign_out(self, access_token: str):
        client = await self._require_client()
        try:
            await client.auth.admin.sign_out(access_token)
        except Exception as e:
            logger.error(f"❌ Auth Error (sign_out): {e}")
            raise RemoteCallError() from e

    # --- Roles ---

    async def has_role(self, user_id: str, role: str) -> bool:
        data = await self._run(
            "has_role",
            lambda c: c.table('user_roles').select("role").eq('user_id', user_id).eq('role', role).limit(1),
        )
        return bool(data)

    # --- Services ---

    async def list_active_services(self) -> List[dict]:
        data = await self._run(
            "list_active_services",
            lambda c: c.table('services').select("*").eq('is_active', True).order('price_per_kg', desc=False),
        )
        return data or []

    async def get_service(self, service_id: str) -> Optional[dict]:
        data = await self._run(
            "get_service",
            lambda c: c.table('services').select("*").eq('id', service_id).limit(1),
        )
        return data[0] if data else None

    # --- Bookings ---

    async def insert_booking(self, row: dict) -> dict:
        data = await self._run("insert_booking", lambda c: c.table('bookings').insert(row))
        if not data:
            logger.error("❌ DB Error (insert_booking): insert returned no row")
            raise RemoteCallError()
        logger.info(f"✅ Booking {data[0].get('id')} stored for user {row.get('user_id')}")
        return data[0]

    async def get_booking(self, booking_id: str) -> Optional[dict]:
        data = await self._run(
            "get_booking",
            lambda c: c.table('bookings').select(BOOKING_WITH_SERVICE).eq('id', booking_id).limit(1),
        )
        return data[0] if data else None

    async def list_bookings_for_user(self, user_id: str) -> List[dict]:
        data = await self._run(
            "list_bookings_for_user",
            lambda c: c.table('bookings')
                .select(BOOKING_WITH_SERVICE)
                .eq('user_id', user_id)
                .order('created_at', desc=True),
        )
        return data or []

    async def list_all_bookings(self) -> List[dict]:
        data = await self._run(
            "list_all_bookings",
            lambda c: c.table('bookings').select("*, services(name)").order('created_at', desc=True),
        )
        return data or []

    async def update_booking_status(self, booking_id: str, status: str) -> Optional[dict]:
        """Single-column update keyed by id. Returns the updated row, or None if no row matched."""
        data = await self._run(
            "update_booking_status",
            lambda c: c.table('bookings').update({'status': status}).eq('id', booking_id),
        )
        if data:
            logger.info(f"🔄 Booking {booking_id} status -> {status}")
            return data[0]
        return None

    # --- Profiles ---

    async def get_profile(self, user_id: str) -> Optional[dict]:
        data = await self._run(
            "get_profile",
            lambda c: c.table('profiles').select("id, full_name, phone, address").eq('id', user_id).limit(1),
        )
        return data[0] if data else None

    async def get_profiles(self, user_ids: List[str]) -> List[dict]:
        if not user_ids:
            return []
        data = await self._run(
            "get_profiles",
            lambda c: c.table('profiles').select("id, full_name, phone").in_('id', user_ids),
        )
        return data or []


db_service = DBService()

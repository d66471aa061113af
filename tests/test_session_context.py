import asyncio
from unittest.mock import MagicMock

import pytest

from app.core.errors import StaleSessionError
from app.services.session_context import SessionContext

from conftest import ADMIN_ID, ADMIN_TOKEN, CUSTOMER_ID


async def start_slow_fetch(ctx, user_id, result="rows"):
    """Starts a guarded fetch that waits until the returned event is set."""
    started = asyncio.Event()
    release = asyncio.Event()

    async def slow_fetch():
        started.set()
        await release.wait()
        return result

    task = asyncio.create_task(ctx.guarded(user_id, slow_fetch()))
    await started.wait()
    return task, release


@pytest.mark.asyncio
async def test_current_user_resolves_token(session_ctx):
    user = await session_ctx.current_user(ADMIN_TOKEN)
    assert user.id == ADMIN_ID
    assert await session_ctx.current_user("expired") is None
    assert await session_ctx.current_user(None) is None


@pytest.mark.asyncio
async def test_guarded_returns_result_without_session_change(session_ctx):
    async def fetch():
        return ["row"]

    assert await session_ctx.guarded(ADMIN_ID, fetch()) == ["row"]


@pytest.mark.asyncio
async def test_response_from_superseded_session_is_dropped(session_ctx):
    task, release = await start_slow_fetch(session_ctx, ADMIN_ID)
    session_ctx.notify("SIGNED_OUT", ADMIN_ID)
    release.set()

    with pytest.raises(StaleSessionError):
        await task


@pytest.mark.asyncio
async def test_other_users_session_change_does_not_interfere(session_ctx):
    task, release = await start_slow_fetch(session_ctx, ADMIN_ID, "admin rows")
    session_ctx.notify("TOKEN_REFRESHED", CUSTOMER_ID)
    release.set()
    assert await task == "admin rows"

    task, release = await start_slow_fetch(session_ctx, ADMIN_ID)
    session_ctx.notify("SIGNED_OUT")
    release.set()
    with pytest.raises(StaleSessionError):
        await task


@pytest.mark.asyncio
async def test_only_users_with_fetches_in_flight_are_tracked(session_ctx):
    for i in range(50):
        session_ctx.notify("SIGNED_IN", f"user-{i}")
    assert session_ctx.tracked_users == 0

    first, release_first = await start_slow_fetch(session_ctx, ADMIN_ID)
    second, release_second = await start_slow_fetch(session_ctx, ADMIN_ID)
    assert session_ctx.tracked_users == 1

    release_first.set()
    await first
    assert session_ctx.tracked_users == 1
    release_second.set()
    await second
    assert session_ctx.tracked_users == 0


@pytest.mark.asyncio
async def test_failed_fetch_is_released(session_ctx):
    async def broken():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await session_ctx.guarded(ADMIN_ID, broken())
    assert session_ctx.tracked_users == 0


@pytest.mark.asyncio
async def test_sign_out_revokes_and_supersedes_in_flight_fetch(session_ctx, fake_db):
    task, release = await start_slow_fetch(session_ctx, ADMIN_ID)
    await session_ctx.sign_out(ADMIN_TOKEN, ADMIN_ID)
    release.set()

    with pytest.raises(StaleSessionError):
        await task
    assert fake_db.signed_out == [ADMIN_TOKEN]
    assert await session_ctx.current_user(ADMIN_TOKEN) is None


@pytest.mark.asyncio
async def test_start_subscribes_and_stop_unsubscribes(fake_db):
    subscription = MagicMock()
    client = MagicMock()
    client.auth.on_auth_state_change.return_value = subscription

    async def get_client():
        return client

    fake_db.get_client = get_client
    ctx = SessionContext(fake_db)

    await ctx.start()
    assert ctx.started
    callback = client.auth.on_auth_state_change.call_args[0][0]

    task, release = await start_slow_fetch(ctx, ADMIN_ID)
    session = MagicMock()
    session.user.id = ADMIN_ID
    callback("SIGNED_IN", session)
    release.set()
    with pytest.raises(StaleSessionError):
        await task

    await ctx.stop()
    subscription.unsubscribe.assert_called_once()
    assert not ctx.started


@pytest.mark.asyncio
async def test_start_without_supabase_is_harmless(session_ctx):
    await session_ctx.start()
    assert not session_ctx.started
    await session_ctx.stop()

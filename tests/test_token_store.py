"""Tests for the Redis refresh-token store."""

import pytest

from anyhire.auth.token_store import RefreshTokenStore
from anyhire.errors import StoreUnavailable
from conftest import BrokenRedis


@pytest.mark.asyncio
async def test_store_sets_key_with_seven_day_ttl(token_store, redis_client):
    await token_store.store("u1", "tok")
    assert redis_client.values["refresh_token:u1"] == "tok"
    assert redis_client.ttls["refresh_token:u1"] == 604800


@pytest.mark.asyncio
async def test_second_store_overwrites_first(token_store, redis_client):
    await token_store.store("u1", "first")
    await token_store.store("u1", "second")
    assert await token_store.fetch("u1") == "second"
    assert [k for k in redis_client.values if k.startswith("refresh_token:u1")] == ["refresh_token:u1"]


@pytest.mark.asyncio
async def test_fetch_missing_returns_none(token_store):
    assert await token_store.fetch("nobody") is None


@pytest.mark.asyncio
async def test_remove(token_store):
    await token_store.store("u1", "tok")
    await token_store.remove("u1")
    assert await token_store.fetch("u1") is None


@pytest.mark.asyncio
async def test_remove_missing_is_noop(token_store):
    await token_store.remove("nobody")


@pytest.mark.asyncio
@pytest.mark.parametrize("op, args", [("store", ("u1", "tok")), ("fetch", ("u1",)), ("remove", ("u1",))])
async def test_redis_errors_become_store_unavailable(op, args):
    store = RefreshTokenStore(BrokenRedis())
    with pytest.raises(StoreUnavailable):
        await getattr(store, op)(*args)

"""Tests for vetify.services.usage (last_used tracking)."""

import logging

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.models.api_key import ApiKey
from vetify.services.usage import UsageRecorder


@pytest.mark.asyncio
async def test_record_usage_sets_last_used(
    db_session: AsyncSession, session_factory, tenant, issue_key
):
    api_key, _ = await issue_key(tenant, ["read:pets"])
    assert api_key.last_used is None
    key_id = api_key.id
    updated_before = api_key.updated_at

    await UsageRecorder(session_factory).record_usage(key_id)

    db_session.expire_all()
    stored = (await db_session.execute(select(ApiKey).where(ApiKey.id == key_id))).scalar_one()
    assert stored.last_used is not None
    assert stored.updated_at.replace(tzinfo=None) == updated_before.replace(tzinfo=None)


@pytest.mark.asyncio
async def test_record_usage_for_unknown_key_is_harmless(session_factory):
    await UsageRecorder(session_factory).record_usage("does-not-exist")


@pytest.mark.asyncio
async def test_record_usage_swallows_and_logs_errors(caplog):
    def broken_factory():
        raise RuntimeError("database is gone")

    with caplog.at_level(logging.ERROR, logger="vetify.services.usage"):
        await UsageRecorder(broken_factory).record_usage("key-1")

    assert "Failed to update last_used" in caplog.text

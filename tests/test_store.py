"""
Tests for the SQL-backed credential store.
"""

import pytest

from auth.errors import ConflictError, NotFoundError
from database.models import DEFAULT_BIO, DEFAULT_PROFILE_PIC
from database.store import CredentialStore


async def _alice(store: CredentialStore):
    return await store.insert(username="alice", email="a@x.com", password_hash="hash-a")


class TestInsert:
    @pytest.mark.asyncio
    async def test_insert_applies_defaults(self, store):
        user = await _alice(store)
        assert user.id is not None
        assert user.profile_pic == DEFAULT_PROFILE_PIC
        assert user.bio == DEFAULT_BIO

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_by_constraint(self, store):
        await _alice(store)
        with pytest.raises(ConflictError):
            await store.insert(username="other", email="a@x.com", password_hash="h")

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected_by_constraint(self, store):
        await _alice(store)
        with pytest.raises(ConflictError):
            await store.insert(username="alice", email="other@x.com", password_hash="h")

    @pytest.mark.asyncio
    async def test_session_usable_after_conflict(self, store):
        await _alice(store)
        with pytest.raises(ConflictError):
            await store.insert(username="alice", email="a@x.com", password_hash="h")
        bob = await store.insert(username="bob", email="b@x.com", password_hash="h")
        assert bob.id is not None


class TestLookups:
    @pytest.mark.asyncio
    async def test_find_by_email_or_username(self, store):
        alice = await _alice(store)
        assert (await store.find_by_identifier("alice")).id == alice.id
        assert (await store.find_by_identifier("a@x.com")).id == alice.id
        assert await store.find_by_identifier("nobody") is None

    @pytest.mark.asyncio
    async def test_exists_by_email_or_username(self, store):
        await _alice(store)
        assert await store.exists_by_email_or_username("a@x.com", "someone")
        assert await store.exists_by_email_or_username("z@x.com", "alice")
        assert not await store.exists_by_email_or_username("z@x.com", "zed")

    @pytest.mark.asyncio
    async def test_exists_by_username_excluding_user(self, store):
        alice = await _alice(store)
        bob = await store.insert(username="bob", email="b@x.com", password_hash="h")
        assert not await store.exists_by_username_excluding_user("alice", alice.id)
        assert await store.exists_by_username_excluding_user("alice", bob.id)

    @pytest.mark.asyncio
    async def test_public_profile_has_no_password_hash(self, store):
        alice = await _alice(store)
        profile = await store.fetch_public_profile(alice.id)
        dumped = profile.model_dump()
        assert set(dumped) == {"id", "username", "email", "profile_pic", "bio"}
        assert "hash-a" not in dumped.values()
        assert await store.fetch_public_profile(9999) is None


class TestUpdates:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, store):
        alice = await _alice(store)
        await store.update_profile(alice.id, bio="new bio")
        profile = await store.fetch_public_profile(alice.id)
        assert profile.username == "alice"
        assert profile.bio == "new bio"

    @pytest.mark.asyncio
    async def test_rename_into_taken_username_conflicts(self, store):
        await _alice(store)
        bob = await store.insert(username="bob", email="b@x.com", password_hash="h")
        with pytest.raises(ConflictError):
            await store.update_profile(bob.id, username="alice")

    @pytest.mark.asyncio
    async def test_update_missing_user(self, store):
        with pytest.raises(NotFoundError):
            await store.update_profile(9999, bio="x")
        with pytest.raises(NotFoundError):
            await store.update_profile_picture(9999, "1.png")

    @pytest.mark.asyncio
    async def test_update_profile_picture(self, store):
        alice = await _alice(store)
        await store.update_profile_picture(alice.id, "1700000000000.png")
        profile = await store.fetch_public_profile(alice.id)
        assert profile.profile_pic == "1700000000000.png"

    @pytest.mark.asyncio
    async def test_email_match_preferred_over_username(self, store):
        # rows written directly; the service refuses '@' in usernames
        squatter = await store.insert(username="bob@x.com", email="s@x.com", password_hash="h")
        bob = await store.insert(username="bob", email="bob@x.com", password_hash="h")
        assert (await store.find_by_identifier("bob@x.com")).id == bob.id
        assert squatter.id != bob.id

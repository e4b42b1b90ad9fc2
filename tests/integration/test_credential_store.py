"""Integration tests for SqlCredentialStore against SQLite."""

import asyncio
import uuid

import pytest

from recordkeep.kernel.identity.credential_store import SqlCredentialStore, TokenEntry
from recordkeep.kernel.identity.exceptions import DuplicateEmailError


class TestInsertAndFind:

    async def test_insert_then_find_by_email(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user("a@b.com", "$2b$04$hash"))

        found = await store.find_by_email("a@b.com")

        assert found is not None
        assert found.id == user.id
        assert found.password_hash == "$2b$04$hash"
        assert found.tokens == []
        assert found.created_at is not None

    async def test_find_missing(self, store: SqlCredentialStore):
        assert await store.find_by_email("nobody@b.com") is None
        assert await store.find_by_id(uuid.uuid4()) is None

    async def test_duplicate_email_rejected(self, store: SqlCredentialStore, make_user):
        first = await store.insert(make_user("a@b.com", "first-hash"))

        with pytest.raises(DuplicateEmailError):
            await store.insert(make_user("a@b.com", "second-hash"))

        found = await store.find_by_email("a@b.com")
        assert found.id == first.id
        assert found.password_hash == "first-hash"

    async def test_email_uniqueness_is_case_sensitive(self, store: SqlCredentialStore, make_user):
        await store.insert(make_user("Case@b.com"))
        await store.insert(make_user("case@b.com"))

        upper = await store.find_by_email("Case@b.com")
        lower = await store.find_by_email("case@b.com")
        assert upper.id != lower.id


class TestTokens:

    async def test_append_and_find_by_token(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user())
        await store.append_token(user.id, TokenEntry(access="auth", token="tok-1"))

        found = await store.find_by_id_and_token(user.id, "tok-1")

        assert found is not None
        assert found.id == user.id
        assert [t.token for t in found.tokens] == ["tok-1"]

    async def test_find_by_token_requires_matching_user_and_access(
        self, store: SqlCredentialStore, make_user,
    ):
        alice = await store.insert(make_user("alice@b.com"))
        bob = await store.insert(make_user("bob@b.com"))
        await store.append_token(alice.id, TokenEntry(access="auth", token="alice-tok"))
        await store.append_token(alice.id, TokenEntry(access="reset", token="reset-tok"))

        assert await store.find_by_id_and_token(bob.id, "alice-tok") is None
        assert await store.find_by_id_and_token(alice.id, "unknown") is None
        assert await store.find_by_id_and_token(alice.id, "reset-tok") is None
        assert await store.find_by_id_and_token(alice.id, "reset-tok", access="reset") is not None

    async def test_tokens_keep_issue_order(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user())
        for n in range(3):
            await store.append_token(user.id, TokenEntry(token=f"tok-{n}"))

        found = await store.find_by_id(user.id)

        assert [t.token for t in found.tokens] == ["tok-0", "tok-1", "tok-2"]
        assert all(t.access == "auth" for t in found.tokens)

    async def test_remove_token_only_touches_that_token(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user())
        await store.append_token(user.id, TokenEntry(token="keep"))
        await store.append_token(user.id, TokenEntry(token="drop"))

        await store.remove_token(user.id, "drop")

        found = await store.find_by_id(user.id)
        assert [t.token for t in found.tokens] == ["keep"]

    async def test_remove_token_is_idempotent(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user())
        await store.append_token(user.id, TokenEntry(token="tok"))

        await store.remove_token(user.id, "tok")
        await store.remove_token(user.id, "tok")
        await store.remove_token(user.id, "never-issued")

        assert (await store.find_by_id(user.id)).tokens == []

    async def test_remove_token_scoped_to_user(self, store: SqlCredentialStore, make_user):
        alice = await store.insert(make_user("alice@b.com"))
        bob = await store.insert(make_user("bob@b.com"))
        await store.append_token(alice.id, TokenEntry(token="alice-tok"))

        await store.remove_token(bob.id, "alice-tok")

        assert await store.find_by_id_and_token(alice.id, "alice-tok") is not None

    async def test_clear_tokens(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user())
        await store.append_token(user.id, TokenEntry(token="a"))
        await store.append_token(user.id, TokenEntry(token="b"))

        await store.clear_tokens(user.id)

        assert (await store.find_by_id(user.id)).tokens == []

    async def test_concurrent_appends_lose_nothing(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user())
        tokens = [f"tok-{n}" for n in range(10)]

        await asyncio.gather(*(store.append_token(user.id, TokenEntry(token=t)) for t in tokens))

        found = await store.find_by_id(user.id)
        assert sorted(t.token for t in found.tokens) == sorted(tokens)

    async def test_concurrent_append_and_remove(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user())
        await store.append_token(user.id, TokenEntry(token="old"))

        await asyncio.gather(
            store.append_token(user.id, TokenEntry(token="new")),
            store.remove_token(user.id, "old"),
        )

        found = await store.find_by_id(user.id)
        assert [t.token for t in found.tokens] == ["new"]


class TestPasswordHash:

    async def test_update_password_hash_revokes_tokens(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user(password_hash="old-hash"))
        await store.append_token(user.id, TokenEntry(token="tok"))

        await store.update_password_hash(user.id, "new-hash")

        found = await store.find_by_id(user.id)
        assert found.password_hash == "new-hash"
        assert found.tokens == []

    async def test_update_password_hash_can_keep_tokens(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user(password_hash="old-hash"))
        await store.append_token(user.id, TokenEntry(token="tok"))

        await store.update_password_hash(user.id, "new-hash", revoke_tokens=False)

        found = await store.find_by_id(user.id)
        assert found.password_hash == "new-hash"
        assert [t.token for t in found.tokens] == ["tok"]

    async def test_update_password_hash_requires_current_hash(
        self, store: SqlCredentialStore, make_user,
    ):
        user = await store.insert(make_user(password_hash="old-hash"))
        await store.append_token(user.id, TokenEntry(token="tok"))

        changed = await store.update_password_hash(user.id, "new-hash", current_hash="stale-hash")

        assert changed is False
        found = await store.find_by_id(user.id)
        assert found.password_hash == "old-hash"
        assert [t.token for t in found.tokens] == ["tok"]

        assert await store.update_password_hash(user.id, "new-hash", current_hash="old-hash") is True
        assert (await store.find_by_id(user.id)).password_hash == "new-hash"


class TestConditionalAppend:

    async def test_append_with_current_hash(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user(password_hash="seen-hash"))

        added = await store.append_token(user.id, TokenEntry(token="tok"), password_hash="seen-hash")

        assert added is True
        assert await store.find_by_id_and_token(user.id, "tok") is not None

    async def test_append_with_stale_hash_adds_nothing(self, store: SqlCredentialStore, make_user):
        user = await store.insert(make_user(password_hash="seen-hash"))
        await store.update_password_hash(user.id, "changed-hash")

        added = await store.append_token(user.id, TokenEntry(token="tok"), password_hash="seen-hash")

        assert added is False
        assert (await store.find_by_id(user.id)).tokens == []

    async def test_append_for_unknown_user(self, store: SqlCredentialStore):
        assert await store.append_token(uuid.uuid4(), TokenEntry(token="tok")) is False

"""
Test cases for the account directory and password helpers.
"""
import pytest

from arkiart.auth.accounts import AccountCreationError
from arkiart.auth.models import hash_password, verify_password, generate_access_token


def test_hash_password_is_salted():
    first = hash_password("secret1")
    second = hash_password("secret1")

    assert first != "secret1"
    assert first != second
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)


def test_verify_password_rejects_bad_input():
    hashed = hash_password("secret1")

    assert not verify_password("secret2", hashed)
    assert not verify_password(None, hashed)
    assert not verify_password("", hashed)
    assert not verify_password("secret1", "not-a-bcrypt-hash")


def test_long_password_hashes_and_verifies():
    password = "p" * 80
    hashed = hash_password(password)

    assert verify_password(password, hashed)
    assert not verify_password("q" * 80, hashed)


def test_generate_access_token():
    token = generate_access_token()

    assert len(token) == 256
    int(token, 16)
    assert token != generate_access_token()


@pytest.mark.asyncio
async def test_create_assigns_token(directory):
    account = await directory.create("alice", hash_password("secret1"))

    assert account.id is not None
    assert account.username == "alice"
    assert account.is_logged_in
    assert account.hashed_password != "secret1"
    assert await directory.count() == 1


@pytest.mark.asyncio
async def test_create_duplicate_username(directory):
    await directory.create("alice", hash_password("secret1"))

    with pytest.raises(AccountCreationError):
        await directory.create("alice", hash_password("secret2"))

    assert await directory.count() == 1
    # The session is still usable after the failed write
    assert await directory.find_by_username("alice") is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("username", [None, "", "a", "x" * 15])
async def test_create_rejects_username_length(directory, username):
    with pytest.raises(AccountCreationError):
        await directory.create(username, hash_password("secret1"))

    assert await directory.count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("username", ["ab", "x" * 14])
async def test_create_accepts_username_bounds(directory, username):
    account = await directory.create(username, hash_password("secret1"))

    assert account.username == username


@pytest.mark.asyncio
async def test_tokens_are_unique_per_account(directory):
    alice = await directory.create("alice", hash_password("secret1"))
    bob = await directory.create("bob", hash_password("secret1"))

    assert alice.access_token != bob.access_token
    assert (await directory.find_by_token(alice.access_token)).username == "alice"
    assert (await directory.find_by_token(bob.access_token)).username == "bob"


@pytest.mark.asyncio
async def test_find_missing(directory):
    assert await directory.find_by_username("nobody") is None
    assert await directory.find_by_token("no-such-token") is None
    assert await directory.find_by_token("") is None
    assert await directory.find_by_token(None) is None


@pytest.mark.asyncio
async def test_clear_token(directory):
    account = await directory.create("alice", hash_password("secret1"))
    token = account.access_token

    await directory.clear_token(account)

    assert not account.is_logged_in
    assert await directory.find_by_token(token) is None
    assert (await directory.find_by_username("alice")).access_token is None


@pytest.mark.asyncio
async def test_cleared_accounts_do_not_match_empty_token(directory):
    alice = await directory.create("alice", hash_password("secret1"))
    bob = await directory.create("bob", hash_password("secret1"))
    await directory.clear_token(alice)
    await directory.clear_token(bob)

    assert await directory.find_by_token(None) is None
    assert await directory.count() == 2


@pytest.mark.asyncio
async def test_issue_token(directory):
    account = await directory.create("alice", hash_password("secret1"))
    old_token = account.access_token
    await directory.clear_token(account)

    await directory.issue_token(account)

    assert account.access_token
    assert account.access_token != old_token
    assert (await directory.find_by_token(account.access_token)).id == account.id


def test_to_public_hides_hash():
    from arkiart.auth.models import Account

    account = Account(id=7, username="alice", hashed_password="hash", access_token="tok")

    assert account.to_public() == {"username": "alice", "id": 7, "accessToken": "tok"}

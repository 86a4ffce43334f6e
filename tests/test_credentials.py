from datetime import timedelta

import pytest
from jose import jwt

from ratings_api.errors import Unauthenticated
from ratings_api.models import Role
from ratings_api.services.credentials import CredentialService, Identity, check_password_policy
from ratings_api.settings import parse_duration


@pytest.fixture
def service() -> CredentialService:
    return CredentialService("unit-secret", bcrypt_rounds=4)


@pytest.mark.parametrize(
    "password",
    ["Abcdefg1!", "Passw0rd#", "A@bcdefg", "Sixteen!Chars_ok"],
)
def test_password_policy_accepts(password: str):
    assert check_password_policy(password) == password


@pytest.mark.parametrize(
    "password",
    [
        "abcdefgh",  # no uppercase, no special
        "Abcdefgh",  # no special
        "abcdefg!",  # no uppercase
        "Ab!1",  # too short
        "Abcdefghijklmno!x",  # 17 chars
    ],
)
def test_password_policy_rejects(password: str):
    with pytest.raises(ValueError):
        check_password_policy(password)


def test_hash_and_verify(service: CredentialService):
    hashed = service.hash_password("Abcdefg1!")
    assert hashed != "Abcdefg1!"
    assert service.verify_password("Abcdefg1!", hashed)
    assert not service.verify_password("Abcdefg1?", hashed)


def test_verify_against_garbage_hash_is_false(service: CredentialService):
    assert not service.verify_password("Abcdefg1!", "not-a-hash")


def test_token_round_trip(service: CredentialService):
    identity = Identity(id=7, email="bob@ratings.io", role=Role.NORMAL_USER)
    token = service.issue_token(identity)
    assert service.decode_token(token) == identity


def test_token_carries_id_email_role(service: CredentialService):
    token = service.issue_token(Identity(id=3, email="o@ratings.io", role=Role.STORE_OWNER))
    claims = jwt.get_unverified_claims(token)
    assert claims["id"] == 3
    assert claims["email"] == "o@ratings.io"
    assert claims["role"] == "STORE_OWNER"
    assert "exp" in claims


def test_expired_token_rejected():
    service = CredentialService("unit-secret", lifetime=timedelta(seconds=-10), bcrypt_rounds=4)
    token = service.issue_token(Identity(id=1, email="a@ratings.io", role=Role.SYSTEM_ADMIN))
    with pytest.raises(Unauthenticated):
        service.decode_token(token)


def test_token_from_other_secret_rejected(service: CredentialService):
    other = CredentialService("other-secret", bcrypt_rounds=4)
    token = other.issue_token(Identity(id=1, email="a@ratings.io", role=Role.SYSTEM_ADMIN))
    with pytest.raises(Unauthenticated):
        service.decode_token(token)


def test_unknown_role_claim_rejected(service: CredentialService):
    token = jwt.encode({"id": 1, "email": "a@ratings.io", "role": "ROOT"}, "unit-secret", algorithm="HS256")
    with pytest.raises(Unauthenticated):
        service.decode_token(token)


def test_garbage_token_rejected(service: CredentialService):
    with pytest.raises(Unauthenticated):
        service.decode_token("not.a.token")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("7d", timedelta(days=7)),
        ("12h", timedelta(hours=12)),
        ("30m", timedelta(minutes=30)),
        ("45s", timedelta(seconds=45)),
        ("3600", timedelta(hours=1)),
    ],
)
def test_parse_duration(value: str, expected: timedelta):
    assert parse_duration(value) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("seven days")

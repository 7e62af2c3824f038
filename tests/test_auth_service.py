"""Tests for password hashing, access tokens and reset tokens."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt
from sqlalchemy.dialects import postgresql

from src.config import Settings, get_settings
from src.models.enums import Role
from src.services.auth import (
    InvalidTokenError,
    authenticate_user,
    clear_reset_token,
    create_access_token,
    create_user,
    decode_access_token,
    find_user_by_reset_token,
    generate_reset_token,
    get_password_hash,
    get_user_by_email,
    hash_reset_token,
    issue_reset_token,
    reset_token_query,
    verify_password,
)


@pytest.fixture
def user(db):
    return create_user(db, "Jane", "jane@example.com", get_password_hash("secret123"), Role.USER)


class TestPasswordHashing:
    def test_hash_then_verify(self):
        hashed = get_password_hash("secret1")
        assert hashed != "secret1"
        assert hashed.startswith("$2")
        assert verify_password("secret1", hashed) is True

    def test_wrong_password_does_not_verify(self):
        hashed = get_password_hash("secret1")
        assert verify_password("secret2", hashed) is False

    def test_salt_differs_per_call(self):
        assert get_password_hash("secret1") != get_password_hash("secret1")

    def test_cost_factor_comes_from_settings(self):
        hashed = get_password_hash("secret1")
        rounds = int(hashed.split("$")[2])
        assert rounds == get_settings().bcrypt_rounds

    @pytest.mark.parametrize("stored", [None, "", "not-a-bcrypt-hash"])
    def test_verify_never_raises_on_bad_hash(self, stored):
        assert verify_password("secret1", stored) is False

    def test_input_past_72_bytes_does_not_verify(self):
        hashed = get_password_hash("a" * 72)
        assert verify_password("a" * 72, hashed) is True
        assert verify_password("a" * 72 + "WRONG!!", hashed) is False

    def test_multibyte_password_counted_in_bytes(self):
        # 25 three-byte characters encode to 75 bytes
        hashed = get_password_hash("\u20ac" * 24)
        assert verify_password("\u20ac" * 25, hashed) is False


class TestAccessTokens:
    def test_round_trip(self):
        token = create_access_token(42)
        assert decode_access_token(token) == 42

    def test_subject_is_string_user_id(self):
        settings = get_settings()
        token = create_access_token(7)
        claims = jwt.get_unverified_claims(token)
        assert claims["sub"] == "7"
        assert claims["exp"] - claims["iat"] == settings.jwt_expiration_minutes * 60

    def test_expired_token_rejected(self):
        token = create_access_token(42, expires_delta=timedelta(seconds=-1))
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_wrong_signature_rejected(self):
        token = jwt.encode(
            {"sub": "42", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            "some-other-secret",
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    @pytest.mark.parametrize("garbage", ["", "garbage", "a.b.c", "Bearer xyz"])
    def test_malformed_token_rejected(self, garbage):
        with pytest.raises(InvalidTokenError):
            decode_access_token(garbage)

    def test_non_numeric_subject_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "jane", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)


class TestResetTokens:
    def test_generate(self):
        now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        reset = generate_reset_token(now)
        assert len(reset.plain_token) == 40  # 20 random bytes, hex encoded
        assert reset.token_hash == hash_reset_token(reset.plain_token)
        assert reset.token_hash != reset.plain_token
        assert reset.expires_at == now + timedelta(minutes=10)

    def test_tokens_are_unique(self):
        assert generate_reset_token().plain_token != generate_reset_token().plain_token

    def test_only_hash_is_stored(self, db, user):
        plain = issue_reset_token(user)
        db.commit()
        assert user.reset_password_token == hash_reset_token(plain)
        assert user.reset_password_token != plain
        assert user.reset_password_expire is not None

    def test_redeem_valid_token(self, db, user):
        plain = issue_reset_token(user)
        db.commit()
        assert find_user_by_reset_token(db, plain).id == user.id

    def test_wrong_token_not_found(self, db, user):
        issue_reset_token(user)
        db.commit()
        assert find_user_by_reset_token(db, "0" * 40) is None

    def test_expired_token_not_found(self, db, user):
        issued_at = datetime.now(UTC)
        plain = issue_reset_token(user, now=issued_at)
        db.commit()
        later = issued_at + timedelta(minutes=10, seconds=1)
        assert find_user_by_reset_token(db, plain, now=later) is None

    def test_token_valid_just_before_expiry(self, db, user):
        issued_at = datetime.now(UTC)
        plain = issue_reset_token(user, now=issued_at)
        db.commit()
        almost = issued_at + timedelta(minutes=9, seconds=59)
        assert find_user_by_reset_token(db, plain, now=almost) is not None

    def test_cleared_token_not_found(self, db, user):
        plain = issue_reset_token(user)
        db.commit()
        clear_reset_token(user)
        db.commit()
        assert user.reset_password_token is None
        assert user.reset_password_expire is None
        assert find_user_by_reset_token(db, plain) is None

    def test_lookup_locks_the_user_row(self, db):
        query = reset_token_query(db, "whatever", datetime.now(UTC))
        sql = str(query.statement.compile(dialect=postgresql.dialect()))
        assert sql.rstrip().endswith("FOR UPDATE")


class TestCredentialStore:
    def test_password_hash_not_loaded_by_default(self, db, user):
        db.expunge_all()
        loaded = get_user_by_email(db, "jane@example.com")
        assert "password_hash" not in loaded.__dict__

    def test_password_hash_loaded_on_request(self, db, user):
        db.expunge_all()
        loaded = get_user_by_email(db, "jane@example.com", include_password=True)
        assert "password_hash" in loaded.__dict__
        assert verify_password("secret123", loaded.password_hash)

    def test_authenticate_user(self, db, user):
        assert authenticate_user(db, "jane@example.com", "secret123").id == user.id
        assert authenticate_user(db, "jane@example.com", "wrong") is None
        assert authenticate_user(db, "nobody@example.com", "secret123") is None


class TestSettings:
    def test_production_rejects_default_secret(self):
        with pytest.raises(ValueError, match="JWT_SECRET"):
            Settings(environment="production", database_url="postgresql://db.internal/devcamper")

    def test_production_accepts_custom_secret(self):
        settings = Settings(
            environment="production",
            jwt_secret="a-real-secret",
            database_url="postgresql://db.internal/devcamper",
        )
        assert settings.cookie_secure

    def test_development_cookie_not_secure(self):
        assert not Settings(environment="development").cookie_secure

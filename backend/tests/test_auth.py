import time
import uuid

import auth
import config
from auth import revoke_session, session_from_token, sign_session


def test_revoked_token_no_longer_verifies():
    token = sign_session(uuid.uuid4(), "someone@example.com")
    assert session_from_token(token) is not None

    revoke_session(token)
    assert session_from_token(token) is None


def test_revocations_are_forgotten_after_the_session_lifetime():
    long_ago = time.time() - config.SESSION_MAX_AGE_SECONDS - 60
    expired = sign_session(uuid.uuid4(), "old@example.com")
    revoke_session(expired, now=long_ago)
    assert expired in auth._revoked_tokens

    recent = sign_session(uuid.uuid4(), "new@example.com")
    revoke_session(recent)

    assert expired not in auth._revoked_tokens
    assert recent in auth._revoked_tokens


def test_admin_detection():
    assert auth.is_admin_email("Admin@Example.com") is True
    assert auth.is_admin_email("someone@example.com") is False
    assert auth.is_admin_email(None) is False

import datetime as dt

import jwt
import pytest

from quizroom.errors import AuthError
from quizroom.services.identity import JwtIdentityVerifier


def test_issued_token_verifies_to_username():
    verifier = JwtIdentityVerifier('secret')
    assert verifier.verify(verifier.issue('alice')) == 'alice'


@pytest.mark.parametrize('token', [None, '', 'not-a-jwt'])
def test_missing_or_garbage_token_is_rejected(token):
    with pytest.raises(AuthError):
        JwtIdentityVerifier('secret').verify(token)


def test_token_signed_with_other_key_is_rejected():
    token = JwtIdentityVerifier('other').issue('alice')
    with pytest.raises(AuthError):
        JwtIdentityVerifier('secret').verify(token)


def test_expired_token_is_rejected():
    past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(days=1)
    token = jwt.encode({'username': 'alice', 'exp': past}, 'secret', algorithm='HS256')
    with pytest.raises(AuthError) as excinfo:
        JwtIdentityVerifier('secret').verify(token)
    assert excinfo.value.message == 'Token expired'


def test_token_without_username_is_rejected():
    token = jwt.encode({'sub': 'alice'}, 'secret', algorithm='HS256')
    with pytest.raises(AuthError):
        JwtIdentityVerifier('secret').verify(token)

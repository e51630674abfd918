"""Shared fixtures for the Weibo token strategy tests."""

import pytest

from core.strategy import AuthenticationAttempt
from model.weibo_models import TokenRequest


@pytest.fixture
def attempt() -> AuthenticationAttempt:
    return AuthenticationAttempt()


@pytest.fixture
def token_request() -> TokenRequest:
    return TokenRequest(body={"access_token": "access_token", "refresh_token": "refresh_token"})

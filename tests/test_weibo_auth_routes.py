"""Tests for the FastAPI routes that run the Weibo token strategy."""

import logging
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app import app
from config.logging_config import SensitiveDataFilter
from core.deps import get_weibo_token_strategy, verify_weibo_user
from core.weibo_token import WeiboTokenStrategy
from model.weibo_models import ProfileValue, WeiboProfile
from service.weibo_oauth_service import InternalOAuthError

from tests.fixtures import STRATEGY_CONFIG

PROFILE = WeiboProfile(
    id=1947261240,
    display_name="KaLun1988",
    gender="m",
    photos=[ProfileValue(value="http://tp1.sinaimg.cn/1947261240/50/5732080843/1")],
    raw='{"id": 1947261240}',
    raw_json={"id": 1947261240},
)


@pytest.fixture
def loader() -> AsyncMock:
    return AsyncMock(return_value=PROFILE)


@pytest.fixture
def client(loader: AsyncMock):
    strategy = WeiboTokenStrategy(STRATEGY_CONFIG, verify_weibo_user)
    strategy._fetcher.fetch_profile = loader
    app.dependency_overrides[get_weibo_token_strategy] = lambda: strategy
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_token_from_form_body(client: TestClient, loader: AsyncMock) -> None:
    response = client.post("/oauth/v1/auth/weibo/token", data={"access_token": "abc"})

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
    loader.assert_awaited_once_with("abc")


def test_token_from_json_body_wins_over_query(client: TestClient, loader: AsyncMock) -> None:
    response = client.post(
        "/oauth/v1/auth/weibo/token?access_token=from-query",
        json={"access_token": "from-body"},
    )

    assert response.status_code == 200
    loader.assert_awaited_once_with("from-body")


def test_internal_token_identifies_user(client: TestClient) -> None:
    token = client.post("/oauth/v1/auth/weibo/token", params={"access_token": "abc"}).json()["access_token"]

    response = client.get("/oauth/v1/auth/weibo/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {
        "id": "1947261240",
        "display_name": "KaLun1988",
        "avatar_url": "http://tp1.sinaimg.cn/1947261240/50/5732080843/1",
    }


def test_users_me_rejects_invalid_token(client: TestClient) -> None:
    response = client.get("/oauth/v1/auth/weibo/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_missing_access_token_is_unauthorized(client: TestClient, loader: AsyncMock) -> None:
    response = client.post("/oauth/v1/auth/weibo/token")

    assert response.status_code == 401
    assert response.json()["detail"] == "You should provide access_token"
    assert response.headers["www-authenticate"] == "Bearer"
    loader.assert_not_called()


def test_profile_route_returns_canonical_profile(client: TestClient) -> None:
    response = client.get("/oauth/v1/auth/weibo/profile", params={"access_token": "abc"})

    assert response.status_code == 200
    body = response.json()
    assert body["provider"] == "weibo"
    assert body["id"] == 1947261240
    assert body["displayName"] == "KaLun1988"
    assert body["name"] == {"familyName": "", "givenName": "", "middleName": ""}
    assert body["_raw"] == '{"id": 1947261240}'
    assert body["_json"] == {"id": 1947261240}


def test_provider_error_is_bad_gateway(client: TestClient, loader: AsyncMock) -> None:
    loader.side_effect = InternalOAuthError("Failed to fetch uid")

    response = client.get("/oauth/v1/auth/weibo/profile", params={"access_token": "abc"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to fetch uid"


def test_unexpected_error_is_server_error(client: TestClient, loader: AsyncMock) -> None:
    loader.side_effect = ValueError("bad payload")

    response = client.get("/oauth/v1/auth/weibo/profile", params={"access_token": "abc"})

    assert response.status_code == 500


def test_profile_without_id_is_rejected(client: TestClient, loader: AsyncMock) -> None:
    loader.return_value = WeiboProfile()

    response = client.post("/oauth/v1/auth/weibo/token", data={"access_token": "abc"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Weibo profile has no id"


def test_default_strategy_uses_configured_options() -> None:
    strategy = get_weibo_token_strategy()

    assert strategy.name == "weibo-token"
    assert strategy.options.uid_url == "https://api.weibo.com/2/account/get_uid.json"
    assert strategy.options.profile_fields == ("id", "name", "emails")


def test_sensitive_data_filter_masks_tokens() -> None:
    record = logging.LogRecord(
        "httpx", logging.INFO, __file__, 1,
        'HTTP Request: GET %s "HTTP/1.1 200 OK"',
        ("https://api.weibo.com/2/users/show.json?uid=1&access_token=2.00abc",),
        None,
    )

    assert SensitiveDataFilter().filter(record) is True
    assert record.getMessage() == 'HTTP Request: GET https://api.weibo.com/2/users/show.json?uid=1&access_token=*** "HTTP/1.1 200 OK"'

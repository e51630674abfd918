import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import httpx
from jose import jwt

# 导入配置
from config.providers import WEIBO_JWT_SECRET_KEY, WEIBO_JWT_ALGORITHM, WEIBO_ACCESS_TOKEN_EXPIRE_MINUTES
# 导入模型
from model.weibo_models import (
    DEFAULT_UID_URL, DEFAULT_PROFILE_URL,
    ProfileName, ProfileValue, WeiboProfile
)

logger = logging.getLogger(__name__)

# 标准字段名 -> 微博字段名
PROFILE_FIELD_MAP = {
    "id": "id",
    "displayName": "screen_name",
    "gender": "gender",
    "profileUrl": "profile_url",
    "photos": "profile_image_url",
}


class InternalOAuthError(Exception):
    """请求微博接口失败 (网络错误或非 2xx 状态码)"""

    def __init__(self, message: str, oauth_error: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.oauth_error = oauth_error

    @property
    def status_code(self) -> Optional[int]:
        if isinstance(self.oauth_error, httpx.HTTPStatusError):
            return self.oauth_error.response.status_code
        return None


class MalformedResponseError(ValueError):
    """微博接口返回的 JSON 缺少必要字段"""


def convert_profile_fields(profile_fields: Optional[Sequence[str]] = None) -> str:
    """把标准资料字段名转换为微博接口使用的字段名，逗号拼接

    >>> convert_profile_fields(["id", "displayName", "custom"])
    'id,screen_name,custom'
    """
    return ",".join(PROFILE_FIELD_MAP.get(field, field) for field in profile_fields or [])


def parse_weibo_profile(body: str) -> WeiboProfile:
    """将 users/show 的响应体映射为标准资料，JSON 解析失败时抛出 json.JSONDecodeError"""
    data = json.loads(body)
    if not isinstance(data, dict):
        raise MalformedResponseError(f"profile response is not an object: {body!r}")
    return WeiboProfile(
        id=data.get("id"),
        display_name=data.get("name") or "",
        # 微博接口不返回这三个字段，保持为空
        name=ProfileName(
            family_name=data.get("last_name") or "",
            given_name=data.get("first_name") or "",
            middle_name=data.get("middle_name") or "",
        ),
        gender=data.get("gender") or "",
        emails=[ProfileValue(value=data.get("email") or "")],
        photos=[ProfileValue(value=data.get("profile_image_url") or "")],
        raw=body,
        raw_json=data,
    )


def _describe_http_error(error: httpx.HTTPError) -> str:
    """只输出异常类型和状态码，异常本身的文本里带有含 access_token 的 URL"""
    if isinstance(error, httpx.HTTPStatusError):
        return f"{type(error).__name__} (status {error.response.status_code})"
    return type(error).__name__


class WeiboProfileFetcher:
    """通过两次接口调用获取微博用户资料：先用 token 换 uid，再按 uid 查资料

    http_client 由调用方注入时复用；否则每次获取资料时临时创建一个。
    """

    def __init__(
            self,
            http_client: Optional[httpx.AsyncClient] = None,
            uid_url: str = DEFAULT_UID_URL,
            profile_url: str = DEFAULT_PROFILE_URL,
            use_authorization_header: bool = False,
    ):
        self._http_client = http_client
        self._uid_url = uid_url
        self._profile_url = profile_url
        self._use_authorization_header = use_authorization_header

    async def fetch_profile(self, access_token: str) -> WeiboProfile:
        if self._http_client is not None:
            return await self._fetch_profile(self._http_client, access_token)
        async with httpx.AsyncClient() as client:
            return await self._fetch_profile(client, access_token)

    async def _fetch_profile(self, client: httpx.AsyncClient, access_token: str) -> WeiboProfile:
        # 1. 用 access_token 获取 uid，解析失败时直接结束，不再请求资料接口
        uid = await self.fetch_uid(client, access_token)

        # 2. 用 uid 获取用户资料
        try:
            body = await self._get(client, self._profile_url, access_token, {"uid": uid})
        except httpx.HTTPError as e:
            logger.warning("请求微博用户资料失败: %s", _describe_http_error(e))
            raise InternalOAuthError("Failed to fetch user profile", e) from e

        return parse_weibo_profile(body)

    async def fetch_uid(self, client: httpx.AsyncClient, access_token: str):
        try:
            body = await self._get(client, self._uid_url, access_token)
        except httpx.HTTPError as e:
            logger.warning("请求微博 uid 失败: %s", _describe_http_error(e))
            raise InternalOAuthError("Failed to fetch uid", e) from e

        data = json.loads(body)
        uid = data.get("uid") if isinstance(data, dict) else None
        # uid 只能是非空字符串或整数，否则不再请求资料接口
        if isinstance(uid, bool) or not isinstance(uid, (str, int)) or uid == "":
            raise MalformedResponseError(f"uid missing from response: {body!r}")
        return uid

    async def _get(self, client: httpx.AsyncClient, url: str, access_token: str, params: Optional[dict] = None) -> str:
        params = dict(params or {})
        headers = {}
        if self._use_authorization_header:
            headers["Authorization"] = f"Bearer {access_token}"
        else:
            params["access_token"] = access_token
        response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.text


def create_internal_weibo_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """创建内部微博用户 Access Token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=WEIBO_ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, WEIBO_JWT_SECRET_KEY, algorithm=WEIBO_JWT_ALGORITHM)
    return encoded_jwt


def decode_internal_weibo_access_token(token: str) -> dict:
    """解码内部 Access Token，失败时抛出 jose.JWTError"""
    return jwt.decode(token, WEIBO_JWT_SECRET_KEY, algorithms=[WEIBO_JWT_ALGORITHM])

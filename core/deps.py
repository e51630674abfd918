import logging
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

# 导入配置
from config.providers import (
    WEIBO_CLIENT_ID, WEIBO_CLIENT_SECRET,
    WEIBO_AUTHORIZE_URL, WEIBO_ACCESS_TOKEN_URL, WEIBO_UID_URL, WEIBO_USER_SHOW_URL,
    WEIBO_PROFILE_FIELDS, WEIBO_PASS_REQ_TO_CALLBACK,
)
from core.strategy import AuthenticationAttempt
from core.weibo_token import WeiboTokenStrategy
# 导入模型
from model.weibo_models import TokenRequest, WeiboProfile, WeiboStrategyOptions, WeiboTokenData, WeiboUser
# 导入服务
from service.weibo_oauth_service import InternalOAuthError, decode_internal_weibo_access_token

logger = logging.getLogger(__name__)


def verify_weibo_user(*args) -> None:
    """应用的 verify 回调：资料中带有微博 id 即视为通过

    兼容 pass_req_to_callback，参数最后两个总是 profile 和 done。
    """
    profile, done = args[-2], args[-1]
    if profile.id in (None, ""):
        return done(None, None, {"message": "Weibo profile has no id"})
    return done(None, profile, {"provider": profile.provider})


@lru_cache(maxsize=1)
def get_weibo_token_strategy() -> WeiboTokenStrategy:
    """根据配置创建 (并缓存) 微博 token 认证策略"""
    options = WeiboStrategyOptions(
        authorization_url=WEIBO_AUTHORIZE_URL,
        token_url=WEIBO_ACCESS_TOKEN_URL,
        uid_url=WEIBO_UID_URL,
        profile_url=WEIBO_USER_SHOW_URL,
        client_id=WEIBO_CLIENT_ID,
        client_secret=WEIBO_CLIENT_SECRET,
        profile_fields=WEIBO_PROFILE_FIELDS,
        pass_req_to_callback=WEIBO_PASS_REQ_TO_CALLBACK,
    )
    return WeiboTokenStrategy(options, verify_weibo_user)


async def build_token_request(request: Request) -> TokenRequest:
    """从表单 / JSON 请求体和查询参数中收集 token 字段"""
    body: dict[str, Any] = {}
    content_type = request.headers.get("content-type", "").lower()
    if "application/json" in content_type:
        try:
            data = await request.json()
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="请求体不是合法的 JSON")
        if isinstance(data, dict):
            body = data
    elif "form" in content_type:
        form = await request.form()
        body = {key: value for key, value in form.items() if isinstance(value, str)}
    return TokenRequest(body=body or None, query=dict(request.query_params) or None)


async def authenticate_weibo_request(
        token_request: Annotated[TokenRequest, Depends(build_token_request)],
        strategy: Annotated[WeiboTokenStrategy, Depends(get_weibo_token_strategy)],
) -> Any:
    """依赖函数：对当前请求执行一次微博 token 认证，返回 verify 回调给出的 user"""
    attempt = AuthenticationAttempt()
    await strategy.authenticate(token_request, attempt)

    outcome = attempt.outcome
    if outcome is None:
        logger.error("verify 回调没有调用 done")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="认证未完成")

    if outcome.status == "success":
        return outcome.user

    if outcome.status == "fail":
        info = outcome.info
        detail = info.get("message") if isinstance(info, dict) else info
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail or "无法验证微博凭证",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if isinstance(outcome.error, InternalOAuthError):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=outcome.error.message)
    logger.error("微博认证出错: %r", outcome.error)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="认证过程出错")


async def get_weibo_profile(user: Annotated[Any, Depends(authenticate_weibo_request)]) -> WeiboProfile:
    if not isinstance(user, WeiboProfile):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="verify 回调返回的不是微博资料")
    return user


# --- 微博用户认证依赖 (内部 Token) ---
weibo_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/oauth/v1/auth/weibo/token")


async def get_current_weibo_user(token: Annotated[str, Depends(weibo_oauth2_scheme)]) -> WeiboUser:
    """依赖函数：解码并验证内部微博用户 JWT Token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="无法验证微博用户凭证",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_internal_weibo_access_token(token)
        token_data = WeiboTokenData(**payload)
    except (JWTError, ValueError):
        raise credentials_exception
    if not token_data.sub:
        raise credentials_exception
    return WeiboUser(id=token_data.sub, display_name=token_data.name, avatar_url=token_data.avatar_url)

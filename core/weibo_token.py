import inspect
import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

import httpx

from core.strategy import StrategyContext
from model.weibo_models import WeiboProfile, WeiboStrategyOptions
from service.weibo_oauth_service import WeiboProfileFetcher, convert_profile_fields

logger = logging.getLogger(__name__)


def _lookup(source: Any, field: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(field)
    return None


class WeiboTokenStrategy:
    """微博 access_token 认证策略

    客户端已经拿到微博的 access_token，直接放在 body 或 query 里提交。
    策略用它向微博查询 uid 和用户资料，再交给应用提供的 verify 回调决定是否通过::

        def verify(access_token, refresh_token, profile, done):
            user = find_user(profile.id)
            done(None, user, {"scope": "read"})

        strategy = WeiboTokenStrategy({"client_id": "123", "client_secret": "shhh"}, verify)

    verify 调用 ``done(error, user, info)``：有 error 则认证出错；
    user 为假值则认证失败，info 作为失败原因；否则认证成功。
    verify 也可以是协程函数。
    """

    name = "weibo-token"

    def __init__(
            self,
            options: WeiboStrategyOptions | Mapping[str, Any] | None,
            verify: Callable[..., Any],
            *,
            http_client: Optional[httpx.AsyncClient] = None,
    ):
        if options is None:
            raise TypeError("WeiboTokenStrategy requires options")
        if not callable(verify):
            raise TypeError("WeiboTokenStrategy requires a verify callback")

        if not isinstance(options, WeiboStrategyOptions):
            options = WeiboStrategyOptions.model_validate(dict(options))

        self.options = options
        self._verify = verify
        self._fetcher = WeiboProfileFetcher(
            http_client=http_client,
            uid_url=options.uid_url,
            profile_url=options.profile_url,
            use_authorization_header=options.use_authorization_header_for_get,
        )

    async def authenticate(self, request: Any, context: StrategyContext) -> None:
        """执行一次认证，结果通过 context 的 success / fail / error 之一返回"""
        access_token_field = self.options.access_token_field
        refresh_token_field = self.options.refresh_token_field
        body = getattr(request, "body", None)
        query = getattr(request, "query", None)

        access_token = _lookup(body, access_token_field) or _lookup(query, access_token_field)
        refresh_token = _lookup(body, refresh_token_field) or _lookup(query, refresh_token_field)

        if not access_token:
            logger.debug("请求中缺少 %s", access_token_field)
            return context.fail({"message": f"You should provide {access_token_field}"})

        try:
            profile = await self.user_profile(access_token)
        except Exception as e:
            logger.warning("获取微博用户资料失败: %s", e)
            return context.error(e)

        finished = False

        def verified(error: Any = None, user: Any = None, info: Any = None) -> None:
            nonlocal finished
            if finished:
                logger.warning("verify 回调重复调用 done，已忽略")
                return
            finished = True

            if error:
                return context.error(error)
            if not user:
                return context.fail(info)
            return context.success(user, info)

        try:
            if self.options.pass_req_to_callback:
                result = self._verify(request, access_token, refresh_token, profile, verified)
            else:
                result = self._verify(access_token, refresh_token, profile, verified)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            if finished:
                raise
            logger.warning("verify 回调抛出异常: %s", e)
            verified(e)

    async def user_profile(self, access_token: str) -> WeiboProfile:
        """获取并标准化微博用户资料"""
        return await self._fetcher.fetch_profile(access_token)

    @property
    def profile_fields_param(self) -> str:
        return convert_profile_fields(self.options.profile_fields)

    convert_profile_fields = staticmethod(convert_profile_fields)

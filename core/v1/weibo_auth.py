from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends

# 导入配置
from config.providers import WEIBO_ACCESS_TOKEN_EXPIRE_MINUTES
# 导入依赖
from core.deps import get_current_weibo_user, get_weibo_profile
# 导入模型
from model.weibo_models import WeiboProfile, WeiboToken, WeiboUser
# 导入服务
from service.weibo_oauth_service import create_internal_weibo_access_token

router = APIRouter(
    prefix="/auth/weibo",
    tags=["Weibo Token Authentication (v1)"]
)


@router.post("/token", response_model=WeiboToken)
async def weibo_token_login(profile: Annotated[WeiboProfile, Depends(get_weibo_profile)]):
    """用客户端已有的微博 access_token 登录，返回内部 Token

    access_token / refresh_token 可以放在表单、JSON 请求体或查询参数中，请求体优先。
    """
    avatar_url = profile.photos[0].value if profile.photos else ""
    internal_access_token = create_internal_weibo_access_token(
        data={"sub": str(profile.id), "name": profile.display_name, "avatar_url": avatar_url},
        expires_delta=timedelta(minutes=WEIBO_ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return WeiboToken(access_token=internal_access_token)


@router.get("/profile")
async def read_weibo_profile(profile: Annotated[WeiboProfile, Depends(get_weibo_profile)]):
    """用微博 access_token 获取标准化后的用户资料"""
    return profile.model_dump(by_alias=True)


@router.get("/users/me", response_model=WeiboUser)
async def read_current_weibo_user(
        current_user: Annotated[WeiboUser, Depends(get_current_weibo_user)]
):
    """获取当前通过微博登录的用户信息 (来自内部 Token)"""
    return current_user

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- 微博接口默认地址 ---
DEFAULT_AUTHORIZATION_URL = "https://api.weibo.com/oauth2/authorize"
DEFAULT_TOKEN_URL = "https://api.weibo.com/oauth2/access_token"
DEFAULT_UID_URL = "https://api.weibo.com/2/account/get_uid.json"
DEFAULT_PROFILE_URL = "https://api.weibo.com/2/users/show.json"


# --- 策略配置 ---
class WeiboStrategyOptions(BaseModel):
    """策略构造时解析的配置，创建后不可修改"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    authorization_url: str = DEFAULT_AUTHORIZATION_URL
    token_url: str = DEFAULT_TOKEN_URL
    uid_url: str = DEFAULT_UID_URL
    profile_url: str = DEFAULT_PROFILE_URL
    client_id: str | None = None  # 原样透传，是否必填由上层 OAuth2 客户端决定
    client_secret: str | None = None
    access_token_field: str = "access_token"
    refresh_token_field: str = "refresh_token"
    profile_fields: tuple[str, ...] = ("id", "name", "emails")
    enable_proof: bool = True  # 仅接受，暂未使用
    pass_req_to_callback: bool = False
    use_authorization_header_for_get: bool = False  # False 时 token 走 access_token 查询参数

    @field_validator("authorization_url", "token_url", "uid_url", "profile_url", mode="before")
    @classmethod
    def _default_when_blank(cls, value, info):
        if not value:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("access_token_field", "refresh_token_field", mode="before")
    @classmethod
    def _default_field_name(cls, value, info):
        if not value:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("profile_fields", mode="before")
    @classmethod
    def _default_profile_fields(cls, value):
        if value is None:
            return ("id", "name", "emails")
        return value


# --- 标准化后的用户资料 ---
class ProfileName(BaseModel):
    family_name: str = Field("", alias="familyName")
    given_name: str = Field("", alias="givenName")
    middle_name: str = Field("", alias="middleName")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ProfileValue(BaseModel):
    value: str = ""

    model_config = ConfigDict(frozen=True)


class WeiboProfile(BaseModel):
    """从 users/show 接口返回数据映射出的标准资料

    raw 总是第二次请求的原始响应体，raw_json 是它解析后的结果。
    """
    provider: Literal["weibo"] = "weibo"
    id: Any = None  # 原样复制，不做清洗
    display_name: str = Field("", alias="displayName")
    name: ProfileName = Field(default_factory=ProfileName)
    gender: str = ""
    emails: list[ProfileValue] = Field(default_factory=list)
    photos: list[ProfileValue] = Field(default_factory=list)
    raw: str = Field("", alias="_raw")
    raw_json: dict[str, Any] = Field(default_factory=dict, alias="_json")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


# --- 认证请求 ---
class TokenRequest(BaseModel):
    """携带 token 的请求，body 优先于 query"""
    body: dict[str, Any] | None = None
    query: dict[str, Any] | None = None


# --- 内部使用的模型 ---
class WeiboUser(BaseModel):
    """返回给客户端的微博用户信息"""
    id: str
    display_name: str | None = None
    avatar_url: str | None = None


class WeiboToken(BaseModel):
    """返回给我们客户端的内部 Token"""
    access_token: str
    token_type: str = "bearer"


class WeiboTokenData(BaseModel):
    """内部 JWT Token 解码后的数据 (Payload)"""
    # 使用微博 uid 作为用户标识符
    sub: str | None = None
    name: str | None = None
    avatar_url: str | None = None

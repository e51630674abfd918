import os

# --- 微博 OAuth 配置 ---
# !! 重要：请将你的微博开放平台应用的 App Key 和 App Secret 设置为环境变量
# !! 切勿将 App Secret 硬编码提交到代码库！
WEIBO_CLIENT_ID = os.getenv("WEIBO_CLIENT_ID") or None
WEIBO_CLIENT_SECRET = os.getenv("WEIBO_CLIENT_SECRET") or None

# 留空则使用 model.weibo_models 中的默认地址
WEIBO_AUTHORIZE_URL = os.getenv("WEIBO_AUTHORIZE_URL", "")
WEIBO_ACCESS_TOKEN_URL = os.getenv("WEIBO_ACCESS_TOKEN_URL", "")
WEIBO_UID_URL = os.getenv("WEIBO_UID_URL", "")
WEIBO_USER_SHOW_URL = os.getenv("WEIBO_USER_SHOW_URL", "")

# 逗号分隔，例如 "id,displayName,photos"
WEIBO_PROFILE_FIELDS = [f.strip() for f in os.getenv("WEIBO_PROFILE_FIELDS", "id,name,emails").split(",") if f.strip()]
WEIBO_PASS_REQ_TO_CALLBACK = os.getenv("WEIBO_PASS_REQ_TO_CALLBACK", "false").lower() in ("1", "true", "yes")

# --- 内部 JWT 配置 (微博登录用户) ---
WEIBO_JWT_SECRET_KEY = os.getenv("WEIBO_JWT_SECRET_KEY", os.getenv("SECRET_KEY", "a_different_secret_for_weibo_jwt"))
WEIBO_JWT_ALGORITHM = os.getenv("WEIBO_JWT_ALGORITHM", os.getenv("ALGORITHM", "HS256"))
WEIBO_ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("WEIBO_ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# --- 日志配置 ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from starlette.middleware.cors import CORSMiddleware

from config.logging_config import setup_logging
from core.router import router

setup_logging()

# --- FastAPI 应用实例 ---
app = FastAPI(title="Weibo Token Auth")

# --- 中间件 ---
# 跨域中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境应配置具体的来源
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- 包含主路由 ---
app.include_router(router)


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head><title>Weibo Token Auth</title></head>
        <body>
            <h1>Weibo Token Auth</h1>
            <ul>
                <li>POST /oauth/v1/auth/weibo/token (access_token in form, JSON body or query)</li>
                <li>GET /oauth/v1/auth/weibo/profile?access_token=...</li>
                <li>GET /oauth/v1/auth/weibo/users/me (internal bearer token)</li>
            </ul>
        </body>
    </html>
    """

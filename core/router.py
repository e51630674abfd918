from fastapi import APIRouter

from core.v1 import weibo_auth

router = APIRouter()

api_v1_router = APIRouter(prefix="/v1")
api_v1_router.include_router(weibo_auth.router)

router.include_router(api_v1_router, prefix="/oauth")

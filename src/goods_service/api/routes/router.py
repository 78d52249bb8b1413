from fastapi import APIRouter

from src.goods_service.api.routes import goods, projects

api_router = APIRouter(prefix="/api")
api_router.include_router(projects.router)
api_router.include_router(goods.router)

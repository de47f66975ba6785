from fastapi import APIRouter

from .routes import graph, routes


def create_api_router() -> APIRouter:
    router = APIRouter(prefix="/api/v1")
    router.include_router(routes.router)
    router.include_router(graph.router)
    return router

from fastapi import Depends, HTTPException, status

from ..config import settings
from ..errors import GeodataUnavailable
from ..services.graph_store import GraphSnapshot, GraphStore, get_store
from ..services.routing import RoutingService


def get_graph_store() -> GraphStore:
    return get_store()


def get_snapshot(store: GraphStore = Depends(get_graph_store)) -> GraphSnapshot:
    try:
        return store.snapshot()
    except GeodataUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


def get_routing_service(store: GraphStore = Depends(get_graph_store)) -> RoutingService:
    return RoutingService(store, settings)

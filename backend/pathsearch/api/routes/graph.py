from fastapi import APIRouter, Depends, HTTPException, status

from ...api import deps
from ...errors import GeodataUnavailable
from ...schemas import GraphSummary
from ...services.graph_store import GraphSnapshot, GraphStore

router = APIRouter(prefix="/graph", tags=["graph"])


def _summary(snapshot: GraphSnapshot) -> GraphSummary:
    graph = snapshot.graph
    return GraphSummary(
        nodes=graph.node_count,
        edges=graph.edge_count,
        ways=len(graph.ways),
        version=snapshot.version,
    )


@router.get("", response_model=GraphSummary)
def graph_summary(snapshot: GraphSnapshot = Depends(deps.get_snapshot)) -> GraphSummary:
    return _summary(snapshot)


@router.get("/geojson")
def graph_geojson(snapshot: GraphSnapshot = Depends(deps.get_snapshot)) -> dict:
    return snapshot.graph.to_geojson()


@router.post("/refresh", response_model=GraphSummary)
def refresh_graph(store: GraphStore = Depends(deps.get_graph_store)) -> GraphSummary:
    try:
        snapshot = store.refresh()
    except GeodataUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return _summary(snapshot)

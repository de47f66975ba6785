from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api import deps
from ...errors import GeodataUnavailable, NoNearbyPoint, SearchAborted, UnknownNodeError
from ...models import Coordinate
from ...schemas import RouteRequest, RouteResponse, SnapOut
from ...services.routing import RoutingService

router = APIRouter(tags=["routing"])


@router.post("/routes", response_model=RouteResponse)
def compute_route(
    payload: RouteRequest,
    service: RoutingService = Depends(deps.get_routing_service),
) -> RouteResponse:
    try:
        result = service.compute_route(
            start=payload.from_location.to_value(),
            end=payload.to_location.to_value(),
        )
    except NoNearbyPoint as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except GeodataUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    except SearchAborted:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="Route search timed out")
    except UnknownNodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return RouteResponse(
        path=result.path_pairs(),
        found=result.found,
        total_distance_km=result.total_distance_km,
        start=SnapOut.from_snap(result.start),
        end=SnapOut.from_snap(result.end),
        explored=result.explored,
    )


@router.get("/snap", response_model=SnapOut)
def snap_point(
    *,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    service: RoutingService = Depends(deps.get_routing_service),
) -> SnapOut:
    try:
        snap = service.snap(Coordinate(lat, lon))
    except NoNearbyPoint as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except GeodataUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return SnapOut.from_snap(snap)

from typing import Optional

from fastapi import APIRouter, Depends

from backend.app.api.schemas import AccessibleResponse, ComponentsResponse, PathResponse
from backend.app.dependencies import get_session
from backend.app.services.graph_session import GraphSession

router = APIRouter()


@router.get("/accessible/{start}", response_model=AccessibleResponse)
def accessible(start: int, session: GraphSession = Depends(get_session)):
    return AccessibleResponse(start=start, vertices=session.accessible_vertices(start))


@router.get("/path", response_model=PathResponse)
def path(start: int, end: int, session: GraphSession = Depends(get_session)):
    found, vertices = session.find_path(start, end)
    return PathResponse(start=start, end=end, found=found, vertices=vertices)


@router.get("/components", response_model=ComponentsResponse)
def components(
    start: Optional[int] = None,
    session: GraphSession = Depends(get_session),
):
    return ComponentsResponse(start=start, components=session.count_components(start))

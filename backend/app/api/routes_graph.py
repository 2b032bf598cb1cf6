from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from backend.app.api.schemas import (
    EdgeModel,
    EdgeRequest,
    ExportFileResponse,
    GraphStatsResponse,
    LoadRequest,
    VertexModel,
)
from backend.app.dependencies import get_session
from backend.app.services.graph_session import GraphSession

router = APIRouter()


@router.post("/load", response_model=GraphStatsResponse)
def graph_load(request: LoadRequest, session: GraphSession = Depends(get_session)):
    session.load_text(request.text, directed=request.directed)
    return session.stats()


@router.get("/stats", response_model=GraphStatsResponse)
def graph_stats(session: GraphSession = Depends(get_session)):
    return session.stats()


@router.get("/export")
def graph_export(session: GraphSession = Depends(get_session)):
    return Response(content=session.export_graphml(), media_type="application/xml")


@router.post("/export/file", response_model=ExportFileResponse)
def graph_export_file(session: GraphSession = Depends(get_session)):
    return ExportFileResponse(path=str(session.export_file()))


@router.get("/vertices", response_model=List[VertexModel])
def list_vertices(session: GraphSession = Depends(get_session)):
    return [
        VertexModel(key=v.key, balance=v.balance)
        for v in session.graph.get_vertices()
    ]


@router.post("/vertices", response_model=GraphStatsResponse, status_code=201)
def add_vertex(request: VertexModel, session: GraphSession = Depends(get_session)):
    session.add_vertex(request.key, request.balance)
    return session.stats()


@router.delete("/vertices/{key}", response_model=GraphStatsResponse)
def remove_vertex(key: int, session: GraphSession = Depends(get_session)):
    session.remove_vertex(key)
    return session.stats()


@router.get("/edges", response_model=List[EdgeModel])
def list_edges(session: GraphSession = Depends(get_session)):
    return [
        EdgeModel(source=e.source, sink=e.sink, capacity=e.capacity, cost=e.cost)
        for e in session.graph.get_edges()
    ]


@router.post("/edges", response_model=GraphStatsResponse, status_code=201)
def add_edge(request: EdgeRequest, session: GraphSession = Depends(get_session)):
    try:
        session.add_edge(
            request.source,
            request.sink,
            capacity=request.capacity,
            cost=request.cost,
            index=request.index,
        )
    except IndexError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return session.stats()


@router.delete("/edges", response_model=GraphStatsResponse)
def remove_edge(
    source: int,
    sink: int,
    both_directions: bool = False,
    session: GraphSession = Depends(get_session),
):
    session.remove_edge(source, sink, both_directions=both_directions)
    return session.stats()

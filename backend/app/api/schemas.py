from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field


class LoadRequest(BaseModel):
    text: str
    directed: Optional[bool] = None


class GraphStatsResponse(BaseModel):
    vertices: int
    edges: int
    directed: bool
    grouped_vertex_count: int
    metadata: Dict[str, Any]


class VertexModel(BaseModel):
    key: int
    balance: float = 0.0


class EdgeModel(BaseModel):
    source: int
    sink: int
    capacity: float
    cost: float


class EdgeRequest(BaseModel):
    source: int
    sink: int
    capacity: Optional[float] = Field(default=None, ge=0)
    cost: Optional[float] = None
    index: Optional[int] = Field(default=None, ge=0)


class ExportFileResponse(BaseModel):
    path: str


class AccessibleResponse(BaseModel):
    start: int
    vertices: List[int]


class PathResponse(BaseModel):
    start: int
    end: int
    found: bool
    vertices: List[int]


class ComponentsResponse(BaseModel):
    start: Optional[int] = None
    components: int

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from mmgraph.exceptions import (
    DuplicateVertexError,
    GraphError,
    MalformedInputError,
    MissingVertexError,
    ResourceExhaustedError,
    SerializationError,
)

from backend.app.config import AppConfig
from backend.app.api.routes_graph import router as graph_router
from backend.app.api.routes_search import router as search_router
from backend.app.dependencies import get_session
from backend.app.services.graph_session import NoActiveGraphError

ERROR_STATUS = {
    MalformedInputError: 400,
    MissingVertexError: 404,
    DuplicateVertexError: 409,
    ResourceExhaustedError: 507,
    SerializationError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle hooks.

    Loads the configured startup graph once before serving requests.
    """
    get_session()

    yield


async def graph_error_handler(request: Request, exc: GraphError) -> JSONResponse:
    status = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)),
        500,
    )
    body = {"error": type(exc).__name__, "detail": str(exc)}
    if isinstance(exc, MalformedInputError):
        body["line"] = exc.line
        body["token"] = exc.token
    return JSONResponse(status_code=status, content=body)


async def no_graph_handler(request: Request, exc: NoActiveGraphError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def create_app(config: AppConfig) -> FastAPI:
    app = FastAPI(
        title=config.app_name,
        lifespan=lifespan,
    )

    app.add_exception_handler(GraphError, graph_error_handler)
    app.add_exception_handler(NoActiveGraphError, no_graph_handler)

    app.include_router(
        graph_router,
        prefix=f"{config.api_prefix}/graph",
        tags=["graph"],
    )

    app.include_router(
        search_router,
        prefix=f"{config.api_prefix}/search",
        tags=["search"],
    )

    return app


config = AppConfig()
app = create_app(config)

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from flow_api.api.flows import router as flows_router
from flow_api.api.schemas import HealthResponse
from flow_api.domain.db import create_pool, ensure_schema
from flow_api.domain.flow_repository import PostgresFlowStore
from flow_api.domain.store import MemoryFlowStore
from flow_api.settings import get_settings


settings = get_settings()
logger = logging.getLogger("flow-api")

app = FastAPI(title="Flow Aggregation API", root_path=settings.ROOT_PATH)
allow_credentials = "*" not in settings.ALLOWED_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(flows_router)


@app.on_event("startup")
async def startup() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)
    app.state.db_pool = None
    app.state.merge_counter = 0
    if settings.STORE_BACKEND == "postgres":
        app.state.db_pool = await create_pool()
        await ensure_schema(app.state.db_pool)
        app.state.store = PostgresFlowStore(app.state.db_pool)
    else:
        app.state.store = MemoryFlowStore()
    logger.info("Flow API started with %s store", settings.STORE_BACKEND)


@app.on_event("shutdown")
async def shutdown() -> None:
    if app.state.db_pool is not None:
        await app.state.db_pool.close()
    logger.info("Flow API stopped")


@app.get("/", response_class=PlainTextResponse)
async def hello() -> str:
    return "Hello World!"


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


def main() -> None:
    uvicorn.run(
        "flow_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

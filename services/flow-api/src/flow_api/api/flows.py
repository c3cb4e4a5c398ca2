import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from flow_api.api.schemas import FlowPayload, MergeResponse
from flow_api.domain.errors import DatastoreError
from flow_api.domain.models import U64_MAX
from flow_api.domain.store import FlowStore
from flow_api.services.flow_service import fetch_all, fetch_hour, merge_flows
from flow_api.settings import get_settings

router = APIRouter(tags=["flows"])
settings = get_settings()
logger = logging.getLogger("flow-api")


def _store(request: Request) -> FlowStore:
    return request.app.state.store


def _require_json(request: Request) -> None:
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "application/json" and not media_type.endswith("+json"):
        logger.info("Rejected flows with Content-Type %r", content_type)
        raise HTTPException(
            status_code=415, detail="Content-Type must be application/json"
        )


def _count_merged(request: Request, merged: int) -> None:
    before = request.app.state.merge_counter
    after = before + merged
    request.app.state.merge_counter = after
    if after // settings.LOG_EVERY_N != before // settings.LOG_EVERY_N:
        logger.info("Merged %s flows", after)


@router.post(
    "/flows", response_model=MergeResponse, dependencies=[Depends(_require_json)]
)
async def ingest_flows(payloads: list[FlowPayload], request: Request) -> MergeResponse:
    try:
        merged = await merge_flows(_store(request), payloads)
    except DatastoreError as exc:
        logger.exception("Unable to merge %s flows", len(payloads))
        raise HTTPException(status_code=503, detail="datastore unavailable") from exc
    logger.debug("POST: added %s flows to aggregate", merged)
    _count_merged(request, merged)
    return MergeResponse(status="ok", merged=merged)


@router.get("/flows", response_model=list[FlowPayload])
async def flows_by_hour(
    request: Request, hour: int = Query(..., ge=0, le=U64_MAX)
) -> list[FlowPayload]:
    try:
        flows = await fetch_hour(_store(request), hour)
    except DatastoreError as exc:
        logger.exception("Unable to read flows for hour %s", hour)
        raise HTTPException(status_code=503, detail="datastore unavailable") from exc
    logger.debug("GET(%s): returned %s flows", hour, len(flows))
    return flows


@router.get("/flows/all", response_model=list[FlowPayload])
async def flows_all(request: Request) -> list[FlowPayload]:
    try:
        flows = await fetch_all(_store(request))
    except DatastoreError as exc:
        logger.exception("Unable to read flows")
        raise HTTPException(status_code=503, detail="datastore unavailable") from exc
    return flows

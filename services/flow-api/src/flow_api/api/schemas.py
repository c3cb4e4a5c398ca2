from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from flow_api.domain.models import U64_MAX

U64 = Annotated[int, Field(ge=0, le=U64_MAX, strict=True)]


class FlowPayload(BaseModel):
    """Flattened wire form of a flow record."""

    model_config = ConfigDict(extra="ignore")

    vpc_id: str = Field(..., strict=True)
    src_app: str = Field(..., strict=True)
    dest_app: str = Field(..., strict=True)
    hour: U64
    bytes_tx: U64
    bytes_rx: U64


class MergeResponse(BaseModel):
    status: str
    merged: int


class HealthResponse(BaseModel):
    status: str

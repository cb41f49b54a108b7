from datetime import datetime

from pydantic import BaseModel
from typing import List, Optional


class DatasetStatus(BaseModel):
    state: str
    source: str
    num_rows: Optional[int] = None
    extrusion: bool = False
    period_styling: bool = False
    message: Optional[str] = None


class BuildingResponse(BaseModel):
    index: int
    fields: dict
    elevation: float
    fill_color: List[int]


class RenderRequest(BaseModel):
    name: str = "buildings"


class JobResponse(BaseModel):
    job_id: str
    status: str
    progress: float
    message: str
    result: Optional[dict] = None


class ModelInfo(BaseModel):
    name: str
    filename: str
    size_bytes: int
    rendered_at: datetime

import logging

from fastapi import APIRouter, Depends, HTTPException

from buildingmap import DatasetLoader, DecodeError, FetchError, LoadState
from buildingmap.constants import POPUP_FIELDS

from backend.dataset import get_loader
from backend.models import BuildingResponse, DatasetStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/buildings", tags=["buildings"])


def _status(loader: DatasetLoader) -> DatasetStatus:
    dataset = loader.dataset
    return DatasetStatus(
        state=loader.state.value,
        source=loader.source,
        num_rows=dataset.num_rows if dataset else None,
        extrusion=dataset.derived.has_elevations if dataset else False,
        period_styling=dataset.derived.has_categories if dataset else False,
        message=str(loader.error) if loader.error else None,
    )


@router.post("/load", response_model=DatasetStatus)
async def load_buildings(loader: DatasetLoader = Depends(get_loader)):
    """Fetch, decode and derive the building dataset.

    Only the first call does any work; while a load is running further
    calls wait for it, and once the dataset is published they return
    immediately.
    """
    try:
        await loader.load()
    except FetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    except DecodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _status(loader)


@router.get("/status", response_model=DatasetStatus)
async def get_status(loader: DatasetLoader = Depends(get_loader)):
    """Report the load state and which derived attributes are available."""
    return _status(loader)


@router.get("/{index}", response_model=BuildingResponse)
async def get_building(index: int, loader: DatasetLoader = Depends(get_loader)):
    """Selected-building lookup: popup fields, elevation and fill color."""
    if loader.state != LoadState.loaded:
        raise HTTPException(status_code=409, detail=f"Dataset is {loader.state.value}")

    dataset = loader.dataset
    if not 0 <= index < dataset.num_rows:
        raise HTTPException(status_code=404, detail="Building not found")

    return BuildingResponse(
        index=index,
        fields=dataset.row_fields(index, POPUP_FIELDS),
        elevation=dataset.accessor.elevation_at(index),
        fill_color=dataset.accessor.fill_color_at(index),
    )

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from backend import config
from backend.models import ModelInfo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/models", tags=["models"])


def _resolve_model(filename: str) -> Optional[Path]:
    """Path of a rendered GLB directly inside the output directory, else None."""
    output_dir = config.OUTPUT_DIR.resolve()
    file_path = (output_dir / filename).resolve()
    if file_path.parent != output_dir or file_path.suffix.lower() != ".glb":
        logger.warning(f"Rejected model request for {filename!r}")
        return None
    if not file_path.is_file():
        return None
    return file_path


def _model_info(glb_file: Path) -> ModelInfo:
    stat = glb_file.stat()
    return ModelInfo(
        name=glb_file.stem.replace("-", " ").title(),
        filename=glb_file.name,
        size_bytes=stat.st_size,
        rendered_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
    )


@router.get("", response_model=List[ModelInfo])
async def list_models():
    """Rendered building scenes, newest first."""
    output_dir: Path = config.OUTPUT_DIR
    if not output_dir.exists():
        return []
    models = [_model_info(p) for p in output_dir.glob("*.glb") if p.is_file()]
    models.sort(key=lambda m: m.rendered_at, reverse=True)
    return models


@router.get("/{filename}")
async def get_model(filename: str):
    file_path = _resolve_model(filename)
    if file_path is None:
        raise HTTPException(status_code=404, detail="Model file not found")

    return FileResponse(
        path=str(file_path),
        media_type="model/gltf-binary",
        filename=file_path.name,
    )

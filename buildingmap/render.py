"""GLB generation: one extruded, period-colored mesh per building row."""

import logging
import time

import numpy as np
import trimesh

from .constants import GEOMETRY_FIELD, MIN_SLAB_HEIGHT
from .geometry import to_shapely, utm_transformer, transform_polygon, extrude
from .models import PathManager

logger = logging.getLogger(__name__)


def _is_lonlat(bounds) -> bool:
    minx, miny, maxx, maxy = bounds
    return -180 <= minx <= maxx <= 180 and -90 <= miny <= maxy <= 90


def _row_geometries(dataset, geometry_field: str) -> list:
    if geometry_field not in dataset.table.schema.names:
        raise ValueError(f"Geometry field '{geometry_field}' not in schema")
    geoms = []
    for i, value in enumerate(dataset.table.column(geometry_field).to_pylist()):
        try:
            geoms.append(to_shapely(value))
        except Exception as e:
            logger.warning(f"Row {i}: unreadable geometry ({e})")
            geoms.append(None)
    return geoms


def build_scene(dataset, geometry_field: str = GEOMETRY_FIELD,
                progress_callback=None) -> trimesh.Scene:
    """Extrude every drawable row of *dataset* into a scene.

    Height comes from ``accessor.elevation_at(i)`` and fill color from
    ``accessor.fill_color_at(i)``; rows without a usable footprint are
    skipped.  Lon/lat footprints are projected to their UTM zone and the
    scene is centred on the footprint bounds.
    """
    def _progress(pct, msg):
        if progress_callback:
            progress_callback(pct, msg)

    accessor = dataset.accessor
    _progress(10, "Reading footprints...")
    geoms = _row_geometries(dataset, geometry_field)

    valid_bounds = np.array([g.bounds for g in geoms if g is not None and not g.is_empty])
    if len(valid_bounds) == 0:
        raise ValueError("No drawable building footprints")
    bounds = (valid_bounds[:, 0].min(), valid_bounds[:, 1].min(),
              valid_bounds[:, 2].max(), valid_bounds[:, 3].max())

    transformer = None
    if _is_lonlat(bounds):
        transformer = utm_transformer((bounds[0] + bounds[2]) / 2,
                                      (bounds[1] + bounds[3]) / 2)
        ox, oz = transformer.transform((bounds[0] + bounds[2]) / 2,
                                       (bounds[1] + bounds[3]) / 2)
    else:
        ox, oz = (bounds[0] + bounds[2]) / 2, (bounds[1] + bounds[3]) / 2

    _progress(30, "Extruding buildings...")
    scene = trimesh.Scene()
    skipped = 0
    for i, geom in enumerate(geoms):
        if geom is None or geom.is_empty or geom.geom_type not in ('Polygon', 'MultiPolygon'):
            skipped += 1
            continue
        local = transform_polygon(geom, transformer) if transformer else geom
        if local is None:
            skipped += 1
            continue
        height = accessor.elevation_at(i)
        if not height > 0:
            height = MIN_SLAB_HEIGHT
        mesh = extrude(local, height, color=accessor.fill_color_at(i))
        if mesh is None:
            skipped += 1
            continue
        mesh.apply_translation([-ox, 0.0, -oz])
        scene.add_geometry(mesh, geom_name=f"building_{i}")

    if skipped:
        logger.warning(f"Skipped {skipped} of {len(geoms)} rows without a drawable footprint")
    logger.info(f"Built scene with {len(scene.geometry)} buildings")
    return scene


def generate_glb(dataset, output_path: str, geometry_field: str = GEOMETRY_FIELD,
                 progress_callback=None) -> str:
    """Generate GLB file. Returns the absolute path to the generated file."""
    t0 = time.perf_counter()
    output_path = PathManager.get_output_path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    scene = build_scene(dataset, geometry_field, progress_callback=progress_callback)
    if progress_callback:
        progress_callback(90, "Writing GLB...")
    scene.export(str(output_path), file_type='glb')

    size_mb = output_path.stat().st_size / 1024 / 1024
    logger.info(f"GLB written to {output_path} ({size_mb:.1f} MB) "
                f"in {time.perf_counter() - t0:.1f}s")
    return str(output_path)

"""Geometry cell parsing, coordinate transforms and footprint extrusion."""

import logging
from typing import Optional

import numpy as np
import trimesh
from pyproj import Transformer
from shapely import wkb, wkt
from shapely.geometry import Polygon, MultiPolygon

logger = logging.getLogger(__name__)


# ── Geometry cells ───────────────────────────────────────────────────────

def _coord(c):
    if isinstance(c, dict):
        return (c['x'], c['y'])
    return (c[0], c[1])


def _is_coord(c) -> bool:
    if isinstance(c, dict):
        return True
    return isinstance(c, (list, tuple)) and len(c) > 0 and not isinstance(c[0], (list, tuple, dict))


def _polygon_from_rings(rings) -> Optional[Polygon]:
    rings = [[_coord(c) for c in ring] for ring in rings if len(ring) >= 3]
    if not rings:
        return None
    return Polygon(rings[0], rings[1:])


def to_shapely(value):
    """Convert one geometry cell to a shapely geometry.

    Accepts WKB bytes, WKT text, or GeoArrow native polygon /
    multipolygon values as produced by ``Array.to_pylist()`` (nested
    lists of ``[x, y]`` pairs or ``{'x': .., 'y': ..}`` structs).
    Returns None for nulls and empty values.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return wkb.loads(bytes(value))
    if isinstance(value, str):
        return wkt.loads(value)
    if not value or not value[0]:
        return None

    if _is_coord(value[0][0]):
        return _polygon_from_rings(value)
    polygons = [p for p in (_polygon_from_rings(rings) for rings in value if rings) if p is not None]
    if not polygons:
        return None
    return MultiPolygon(polygons)


# ── Coordinate transforms ───────────────────────────────────────────────

def utm_transformer(center_lon: float, center_lat: float) -> Transformer:
    """WGS84 -> UTM transformer for the zone containing the given point."""
    utm_zone = int((center_lon + 180) / 6) + 1
    utm_epsg = 32600 + utm_zone if center_lat >= 0 else 32700 + utm_zone
    logger.info(f"Using UTM zone {utm_zone} (EPSG:{utm_epsg}) for coordinate transform")
    return Transformer.from_crs("EPSG:4326", f"EPSG:{utm_epsg}", always_xy=True)


def _transform_ring(coords, transformer):
    xy = np.asarray(coords, dtype=np.float64)[:, :2]
    tx, ty = transformer.transform(xy[:, 0], xy[:, 1])
    ring = np.column_stack([tx, ty])
    return ring[~np.isnan(ring).any(axis=1)]


def transform_polygon(polygon, transformer):
    """Transform polygon coordinates; None when the result is unusable.

    Points, lines and collections have no footprint and also give None.
    """
    if polygon.geom_type not in ('Polygon', 'MultiPolygon'):
        return None
    if isinstance(polygon, MultiPolygon):
        transformed_polys = [transform_polygon(p, transformer) for p in polygon.geoms]
        transformed_polys = [p for p in transformed_polys if p is not None]
        if not transformed_polys:
            return None
        return MultiPolygon(transformed_polys)

    exterior = _transform_ring(polygon.exterior.coords, transformer)
    if len(exterior) < 3:
        return None
    interiors = [r for r in (_transform_ring(i.coords, transformer) for i in polygon.interiors)
                 if len(r) >= 3]
    transformed = Polygon(exterior, interiors)
    if transformed.is_valid and transformed.area > 0:
        return transformed
    return None


# ── Extrusion ────────────────────────────────────────────────────────────

def extrude(geometry, height: float, color=None) -> Optional[trimesh.Trimesh]:
    """Extrude a footprint into a mesh in glTF Y-up convention.

    Uses ``trimesh.creation.extrude_polygon`` (handles concave polygons
    and holes), then swaps Y<->Z and reverses face winding to compensate
    for the handedness flip.  *color* is an RGBA list applied to every
    face.
    """
    if geometry.geom_type == 'MultiPolygon':
        polygons = list(geometry.geoms)
    elif geometry.geom_type == 'Polygon':
        polygons = [geometry]
    else:
        return None

    meshes = []
    for poly in polygons:
        if poly.is_empty or poly.area < 0.01:
            continue
        try:
            mesh = trimesh.creation.extrude_polygon(poly, height=height)
        except Exception as e:
            logger.warning(f"extrude_polygon failed: {e}")
            continue
        v = mesh.vertices
        verts = np.column_stack([v[:, 0], v[:, 2], v[:, 1]])
        faces = mesh.faces[:, [0, 2, 1]]
        meshes.append(trimesh.Trimesh(vertices=verts, faces=faces, process=False))

    if not meshes:
        return None
    mesh = trimesh.util.concatenate(meshes)
    if color is not None:
        rgba = np.array(color, dtype=np.uint8)
        mesh.visual.face_colors = np.tile(rgba, (len(mesh.faces), 1))
    return mesh

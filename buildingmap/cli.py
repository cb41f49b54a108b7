"""Click CLI commands for buildingmap."""

import logging

import click

from .constants import PARQUET_DATA_URL, FLOORS_FIELD, PERIOD_FIELD, EXTRUSION_SCALE, POPUP_FIELDS
from .decoder import describe
from .errors import BuildingMapError
from .loader import DatasetLoader
from .render import generate_glb

logger = logging.getLogger(__name__)

source_option = click.option('--source', default=PARQUET_DATA_URL, show_default=True,
                              help='Parquet / Arrow URL or local path')


def dataset_options(f):
    f = click.option('--floors-field', default=FLOORS_FIELD, show_default=True,
                     help='Numeric field used for extrusion')(f)
    f = click.option('--period-field', default=PERIOD_FIELD, show_default=True,
                     help='Construction-period field used for styling')(f)
    f = click.option('--scale', default=EXTRUSION_SCALE, show_default=True,
                     help='Extrusion height per floor')(f)
    return f


def _load(source: str, floors_field: str, period_field: str, scale: float):
    loader = DatasetLoader(source, numeric_field=floors_field,
                           categorical_field=period_field, scale=scale)
    try:
        return loader.load_sync()
    except BuildingMapError as e:
        logger.error(f"Error loading {source}: {e}")
        raise click.ClickException(str(e))


@click.group()
def cli():
    """buildingmap CLI for decoding and rendering building footprint datasets."""
    pass


@cli.command()
@source_option
@dataset_options
def info(source: str, floors_field: str, period_field: str, scale: float):
    """Show the row count, schema and derived-attribute status."""
    dataset = _load(source, floors_field, period_field, scale)
    click.echo(f"Total buildings: {dataset.num_rows}")
    for name, type_str in describe(dataset.table):
        click.echo(f"  {name}: {type_str}")
    click.echo(f"Extrusion: {'on' if dataset.derived.has_elevations else 'off'}")
    click.echo(f"Period styling: {'on' if dataset.derived.has_categories else 'off'}")


@cli.command()
@source_option
@click.argument('index', type=int)
@dataset_options
def inspect(source: str, index: int, floors_field: str, period_field: str, scale: float):
    """Show the selected-building fields for one row."""
    dataset = _load(source, floors_field, period_field, scale)
    try:
        fields = dataset.row_fields(index, POPUP_FIELDS)
    except IndexError as e:
        raise click.ClickException(str(e))

    click.echo("Selected Building")
    for name, value in fields.items():
        click.echo(f"  {name}: {value}")
    click.echo(f"  elevation: {dataset.accessor.elevation_at(index)}")
    click.echo(f"  fill color: {dataset.accessor.fill_color_at(index)}")


@cli.command()
@source_option
@click.option('--output', '-o', default='buildings.glb', help='Output GLB file path')
@dataset_options
def render(source: str, output: str, floors_field: str, period_field: str, scale: float):
    """Extrude every building and write a GLB scene."""
    dataset = _load(source, floors_field, period_field, scale)

    def _progress(pct, msg):
        click.echo(f"[{pct:3.0f}%] {msg}")

    try:
        path = generate_glb(dataset, output, progress_callback=_progress)
    except ValueError as e:
        logger.error(f"Error rendering buildings: {e}")
        raise click.ClickException(str(e))
    click.echo(f"GLB written to: {path}")


@cli.command()
@click.option('--host', default='127.0.0.1', show_default=True, help='Bind address')
@click.option('--port', default=8000, show_default=True, help='Bind port')
@click.option('--reload', is_flag=True, help='Restart on code changes')
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    click.echo(f"Serving buildingmap API on http://{host}:{port}")
    uvicorn.run("backend.app:app", host=host, port=port, reload=reload)


if __name__ == '__main__':
    cli()

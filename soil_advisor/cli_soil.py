"""CLI commands for soil analysis and crop advice."""

import json

import click
from rich.console import Console
from rich.table import Table

from soil_advisor.logging_config import get_logger, setup_logging
from soil_advisor.soil import InputValidationError, SoilAnalysisService, SoilType
from soil_advisor.soil.crops import supported_soil_types
from soil_advisor.soil.models import CropRecommendations, SoilAnalysisResult

console = Console()
logger = get_logger(__name__)


def _configure_logging(verbose: bool, log_file: str | None) -> None:
    setup_logging(
        level="DEBUG" if verbose else "WARNING",
        log_file=log_file,
        enable_file_logging=log_file is not None,
    )


def _load_service(use_remote: bool | None = None) -> SoilAnalysisService:
    try:
        return SoilAnalysisService.from_config(use_remote=use_remote)
    except ValueError as e:
        raise click.ClickException(f"Configuration error: {e}") from e


@click.group()
def soil() -> None:
    """Soil type analysis and crop recommendation commands."""
    pass


@soil.command()
@click.option("--lon", "longitude", type=float, required=True, help="Longitude (-180..180)")
@click.option("--lat", "latitude", type=float, required=True, help="Latitude (-90..90)")
@click.option(
    "--depth", type=float, default=30.0, show_default=True, help="Sampling depth in cm (0..200]"
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option("--offline", is_flag=True, help="Skip SoilGrids and use the fallback classifier")
@click.option("--with-crops", is_flag=True, help="Include crop recommendations")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also log to this file")
def analyze(
    longitude: float,
    latitude: float,
    depth: float,
    output_format: str,
    offline: bool,
    with_crops: bool,
    verbose: bool,
    log_file: str | None,
) -> None:
    """Classify the soil at a location and describe its properties."""
    _configure_logging(verbose, log_file)

    service = _load_service(use_remote=not offline)

    try:
        if with_crops:
            result, advice = service.analyze_with_recommendations(
                longitude, latitude, depth
            )
        else:
            result, advice = service.analyze(longitude, latitude, depth), None
    except InputValidationError as e:
        raise click.UsageError(f"Invalid input: {e}") from e

    if output_format == "json":
        payload = {"analysis": result.model_dump(mode="json", by_alias=True)}
        if advice is not None:
            payload["crops"] = advice.model_dump(mode="json", by_alias=True)
        click.echo(json.dumps(payload, indent=2))
        return

    _print_analysis(result)
    if advice is not None:
        _print_crops(result.soil_type.value, advice)


@soil.command()
@click.argument("soil_type")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def crops(soil_type: str, output_format: str) -> None:
    """Recommend crops for SOIL_TYPE (e.g. Loam, Clay, "Sandy")."""
    _configure_logging(False, None)

    advice = SoilAnalysisService(use_remote=False).recommend_crops(soil_type)

    if output_format == "json":
        click.echo(json.dumps(advice.model_dump(mode="json", by_alias=True), indent=2))
    else:
        _print_crops(soil_type, advice)


@soil.command()
def types() -> None:
    """List soil types and whether they have a dedicated crop list."""
    with_crops = set(supported_soil_types())

    table = Table(title="Soil Types")
    table.add_column("Soil Type")
    table.add_column("Crop List")
    for soil_type in SoilType:
        if soil_type is SoilType.UNKNOWN:
            continue
        table.add_row(soil_type.value, "dedicated" if soil_type in with_crops else "generic")
    console.print(table)


@soil.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def providers(verbose: bool) -> None:
    """Show status of the soil composition provider."""
    _configure_logging(verbose, None)

    status = _load_service().get_provider_status()

    click.echo("Soil Data Provider Status:")
    click.echo("=" * 50)
    for info in status.values():
        mark = "✓" if info["available"] else "✗"
        click.echo(f"\n{mark} {info['name']}")
        click.echo(f"   Enabled: {'yes' if info['enabled'] else 'no'}")
        click.echo(f"   Coverage: {info['coverage']}")


def _format_value(value: float | str) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _print_analysis(result: SoilAnalysisResult) -> None:
    """Print an analysis result as a table."""
    location = result.location
    if location is not None:
        console.print(
            f"\nSoil at ({location.latitude}, {location.longitude}), "
            f"depth {location.depth}cm"
        )
    console.print(f"Soil Type: [bold]{result.soil_type.value}[/bold] ({result.source.value})")
    console.print(result.description)

    table = Table(title="Soil Properties")
    table.add_column("Property")
    table.add_column("Value", justify="right")
    table.add_column("Unit")
    table.add_column("Notes")
    for prop in result.properties:
        table.add_row(
            prop.name, _format_value(prop.value), prop.unit or "", prop.description or ""
        )
    console.print(table)


def _print_crops(label: str, advice: CropRecommendations) -> None:
    """Print crop recommendations as a table."""
    table = Table(title=f"Recommended Crops for {label}")
    table.add_column("Crop")
    table.add_column("Suitability")
    table.add_column("Why")
    for crop in advice.recommended_crops:
        table.add_row(crop.name, crop.suitability.value, crop.description)
    console.print(table)
    if advice.notes:
        console.print(f"Notes: {advice.notes}")

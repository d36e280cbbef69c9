#!/usr/bin/env python3
"""sattrack command-line interface.

Usage::

    sattrack read 25544 --lat 55.68 --lon 12.57 --alt 30
    sattrack read 25544 --tle-dir data/tle --output iss.csv
    sattrack scan data/tle/stations.tle 25544
    sattrack index --tle-dir data/tle
    sattrack update stations
    sattrack latest 25544 --output iss.json
"""
from __future__ import annotations

import sys
import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .catalog import CatalogIndex, ScanStatus, scan_catalog
from .config import CatalogConfig
from .sat_data import ReadStatus, read_satellite
from .satellite import Observer, Satellite

console = Console()

tle_dir_option = click.option(
    "--tle-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Catalog directory (default: $SATTRACK_TLE_DIR or ~/.sattrack/tle)",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """sattrack — catalog lookup and epoch state initialization."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s — %(message)s")


@main.command()
@click.argument("catnum", type=int)
@tle_dir_option
@click.option("--lat", type=float, help="Observer latitude (deg, north positive)")
@click.option("--lon", type=float, help="Observer longitude (deg, east positive)")
@click.option("--alt", type=float, default=0.0, help="Observer altitude (m)")
@click.option("--output", "-o", type=click.Path(), help="Save state to CSV or JSON")
def read(
    catnum: int,
    tle_dir: Path | None,
    lat: float | None,
    lon: float | None,
    alt: float,
    output: str | None,
):
    """Read a satellite from the catalog and show its state at epoch."""
    config = CatalogConfig.from_env(tle_dir)
    observer = None
    if lat is not None or lon is not None:
        observer = Observer(lat=lat or 0.0, lon=lon or 0.0, alt=alt)

    sat = Satellite()
    status = read_satellite(catnum, sat, config=config, observer=observer)
    if status is not ReadStatus.OK:
        console.print(f"[red]#{catnum}: {status.name.replace('_', ' ').lower()}[/red]")
        sys.exit(1)

    _display_state(sat, observer)

    if output:
        _save_row(sat.to_dict(), output)
        console.print(f"\nState saved to {output}")


@main.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.argument("catnum", type=int)
def scan(filepath: str, catnum: int):
    """Scan one catalog file for a catalog number."""
    result = scan_catalog(filepath, catnum)
    color = "green" if result.status is ScanStatus.FOUND else "red"
    console.print(
        f"[{color}]{result.status.name}[/{color}] after {result.groups_scanned} group(s)"
        + (f": {result.reason}" if result.reason else "")
    )
    if result.tle is not None:
        tle = result.tle
        console.print(
            f"{tle.name or 'UNKNOWN'} (#{tle.catnum}) epoch {tle.epoch_dt:%Y-%m-%d %H:%M:%S}, "
            f"checksums {'ok' if tle.valid else 'BAD'}"
        )
    if result.status is not ScanStatus.FOUND:
        sys.exit(1)


@main.command()
@tle_dir_option
def index(tle_dir: Path | None):
    """List the catalog numbers found in the catalog directory."""
    config = CatalogConfig.from_env(tle_dir)
    catalog = CatalogIndex.build(config)
    if not len(catalog):
        console.print(f"[yellow]No element sets under {config.base_dir}[/yellow]")
        return

    table = Table(title=str(config.base_dir), box=box.SIMPLE_HEAVY)
    table.add_column("Catalog #", justify="right", style="cyan")
    table.add_column("File")
    for catnum, filename in catalog.items():
        table.add_row(str(catnum), filename)
    console.print(table)


@main.command()
@click.argument("group")
@tle_dir_option
@click.option("--force", is_flag=True, help="Ignore the local cache")
def update(group: str, tle_dir: Path | None, force: bool):
    """Download a CelesTrak group into the catalog directory."""
    from .celestrak import CelestrakClient

    client = CelestrakClient(CatalogConfig.from_env(tle_dir))
    path = client.update_group(group, force=force)
    console.print(f"Catalog written to {path}")


@main.command()
@click.argument("catnum", type=int)
@click.option("--output", "-o", type=click.Path(), help="Save the element set to CSV or JSON")
def latest(catnum: int, output: str | None):
    """Fetch the current element set for one satellite from CelesTrak."""
    from .celestrak import CelestrakClient

    tle = CelestrakClient().fetch_latest(catnum)
    if tle is None:
        console.print(f"[red]#{catnum}: no element set returned[/red]")
        sys.exit(1)

    row = tle.to_dict()
    table = Table(title=f"{tle.name or 'UNKNOWN'} (#{tle.catnum})", box=box.SIMPLE_HEAVY)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in row.items():
        table.add_row(name, f"{value}")
    console.print(table)

    if output:
        _save_row(row, output)
        console.print(f"\nElement set saved to {output}")


def _display_state(sat: Satellite, observer: Observer | None):
    """Display an initialized state with rich formatting."""
    tle = sat.tle
    where = (
        f"{observer.lat:.4f}°, {observer.lon:.4f}°, {observer.alt:.0f} m"
        if observer
        else "reference (0°, 0°, 0 m)"
    )
    console.print(
        Panel(
            f"[bold]{sat.name}[/bold] (#{tle.catnum})\n"
            f"Epoch: {tle.epoch_dt:%Y-%m-%d %H:%M:%S} UTC (JD {sat.jul_epoch:.6f})\n"
            f"Model: {sat.ephemeris.value}  Orbit type: {sat.otype.name}\n"
            f"Observer: {where}",
            title="Epoch State",
            box=box.ROUNDED,
        )
    )

    table = Table(box=box.SIMPLE_HEAVY, show_header=False)
    table.add_column("Quantity", style="cyan")
    table.add_column("Value", justify="right")
    rows = [
        ("Azimuth", f"{sat.az:.2f}°"),
        ("Elevation", f"{sat.el:.2f}°"),
        ("Range", f"{sat.range:.1f} km"),
        ("Range rate", f"{sat.range_rate:+.3f} km/s"),
        ("RA / Dec", f"{sat.ra:.2f}° / {sat.dec:+.2f}°"),
        ("Sub-satellite point", f"{sat.ssplat:+.3f}°, {sat.ssplon:+.3f}°"),
        ("Altitude", f"{sat.alt:.1f} km"),
        ("Speed", f"{sat.velo:.3f} km/s"),
        ("Footprint", f"{sat.footprint:.1f} km"),
        ("Phase (MA/256)", f"{sat.ma:.1f}"),
        ("Orbit", f"{sat.orbit}"),
    ]
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


def _save_row(row: dict, output: str):
    if output.endswith(".json"):
        Path(output).write_text(json.dumps(row, indent=2, default=str))
    else:
        import pandas as pd
        pd.DataFrame([row]).to_csv(output, index=False)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
sattrack Example: initialize a few satellites at their element set epochs.

Writes a small catalog into a temporary directory, reads each satellite
through the catalog index and prints its state at epoch as seen from
Copenhagen. No network access required.
"""
import sys
sys.path.insert(0, "src")

import tempfile
from pathlib import Path

from sattrack.config import CatalogConfig
from sattrack.sat_data import ReadStatus, read_satellite
from sattrack.satellite import Observer, Satellite

CATALOG = """\
ISS (ZARYA)
1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927
2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537
HST
1 20580U 90037B   08264.50000000  .00000764  00000-0  34340-4 0  9994
2 20580  28.4700 100.2000 0002500 300.0000  60.0000 15.09000000400006
GEO TEST
1 28884U 05041A   08264.50000000 -.00000100  00000-0  00000-0 0  9997
2 28884   0.0500 100.0000 0002000 200.0000 150.0000  1.00270000 10009
"""


def main():
    print("=" * 72)
    print("  sattrack — Epoch State Demo")
    print("=" * 72)

    observer = Observer(lat=55.6761, lon=12.5683, alt=10.0, name="Copenhagen")

    with tempfile.TemporaryDirectory() as tmp:
        Path(tmp, "demo.tle").write_text(CATALOG)
        config = CatalogConfig(tmp)

        print(f"\n{'NAME':14s} {'MODEL':>5} {'TYPE':>7} {'LAT':>8} {'LON':>9} "
              f"{'ALT km':>9} {'AZ':>7} {'EL':>7} {'FOOTPRINT':>10}")
        print("-" * 84)

        for catnum in (25544, 20580, 28884, 99999):
            sat = Satellite()
            status = read_satellite(catnum, sat, config=config, observer=observer)
            if status != ReadStatus.OK:
                print(f"#{catnum:<13d} {status.name}")
                continue

            print(f"{sat.name:14s} {sat.ephemeris.value:>5} {sat.otype.name:>7} "
                  f"{sat.ssplat:8.3f} {sat.ssplon:9.3f} {sat.alt:9.1f} "
                  f"{sat.az:7.2f} {sat.el:7.2f} {sat.footprint:10.1f}")


if __name__ == "__main__":
    main()

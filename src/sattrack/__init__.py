"""sattrack — satellite catalog lookup and epoch state initialization.

Locate a satellite's element set in local TLE catalogs, validate it and
compute its tracking state at the element set epoch, ready for
time-stepped propagation.

Modules:
    tle_parser:  Parse and checksum-validate three-line element sets.
    catalog:     Catalog file scanning and catalog number lookup.
    propagator:  SGP4/SDP4 model selection and propagation boundary.
    orbit_tools: Time, observer and sub-satellite point geometry.
    classifier:  Coarse orbit classification.
    satellite:   Satellite state and observer location.
    sat_data:    Read a satellite and initialize its epoch state.
    config:      Catalog directory configuration.
    celestrak:   CelesTrak catalog downloads.
    cli:         Command-line interface.

Example:
    >>> from sattrack.config import CatalogConfig
    >>> from sattrack.sat_data import ReadStatus, read_satellite
    >>> from sattrack.satellite import Satellite
    >>>
    >>> sat = Satellite()
    >>> if read_satellite(25544, sat, config=CatalogConfig("data/tle")) == ReadStatus.OK:
    ...     print(sat.ssplat, sat.ssplon, sat.alt)
"""

__version__ = "0.1.0"

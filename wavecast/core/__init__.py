"""
File Summary:
- Hosts the hindcast data model shared by ingest and visualization layers.
- Re-exports grid, channel, record, and dataset types plus the no-data sentinel.
- See core.records for validation rules and xarray conversion helpers.
"""

from .records import NO_DATA, Channel, Grid, Record, WW3Dataset, record_from_xarray

__all__ = ["NO_DATA", "Channel", "Grid", "Record", "WW3Dataset", "record_from_xarray"]

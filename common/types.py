from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict


DateStr = str


@dataclass(frozen=True, slots=True)
class Config:
    """
    Start-up parameters of the web view. Built once from the command line
    and shared read-only by every request handler.

    Attributes:
        latitude, longitude: map center, WGS84 degrees.
        data_path: file whose contents and modification date are shown.
        host, port: bind address for the HTTP server.
    """
    latitude: float
    longitude: float
    data_path: Path
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass(frozen=True, slots=True)
class DataSnapshot:
    """
    Contents and modification time of the data file, observed once.

    Attributes:
        contents: full file text.
        modified_at: last-modification time, timezone-aware UTC.
    """
    contents: str
    modified_at: datetime

    def __post_init__(self) -> None:
        if self.modified_at.tzinfo is None:
            raise ValueError("modified_at must be timezone-aware")
        object.__setattr__(self, "modified_at", self.modified_at.astimezone(timezone.utc))


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Values handed to the `index` template for one request."""
    latitude: str
    longitude: str
    data: str
    time: DateStr

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class StationPrice:
    """
    Gas prices at one warehouse, as fetched by the collector.

    Attributes:
        ts: fetch time, POSIX seconds.
        station_id: warehouse location id.
        name: user-facing warehouse name.
        lat, lon: warehouse location, WGS84 degrees.
        regular, premium, diesel: price per gallon; 0 = grade not sold here.
    """
    ts: int
    station_id: int
    name: str
    lat: float
    lon: float
    regular: float = 0.0
    premium: float = 0.0
    diesel: float = 0.0

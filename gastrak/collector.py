"""
Gas price collector: writes the CSV that the web view serves as its data file.

Queries the Costco warehouse lookup for gas stations near a coordinate pair
and prints one row per warehouse:

    ts,id,name,lat,lng,regular,premium,diesel

Empty price columns mean the grade is not sold at that warehouse.

Example (e.g. from cron, then serve the file with gastrak-server):
  python -m gastrak.collector --latitude 37.7749 --longitude -122.4194 > data/current.csv
"""
from __future__ import annotations

import argparse
import csv
import sys
import time
from typing import Any, Dict, IO, Iterable, List, Optional, Sequence

import requests

from common.logging_setup import get_logger, setup_logging
from common.types import StationPrice
from common.utils import decimal_str
from gastrak.config import finite_float

log = get_logger(__name__)

GRADES = ("regular", "premium", "diesel")


class CollectorError(RuntimeError):
    """The lookup request failed or its response could not be parsed."""


class WarehouseLookupService:
    # The endpoint rejects requests without these
    headers = {
        "User-Agent": "Gastrak/1.0",
        "Accept-Language": "en-US,en;q=0.5",
        "Accept": "*/*",
    }

    def __init__(self, session: Optional[requests.Session] = None, max_results: int = 50):
        """
        Params:
            session: optional requests.Session for connection reuse
            max_results: warehouses per query (the endpoint caps this at 50)
        """
        self.base_url = "https://www.costco.com/AjaxWarehouseBrowseLookupView"
        self.session = session or requests.Session()
        self.max_results = max_results

    def build_params(self, lat: float, lon: float) -> Dict[str, str]:
        return {
            "numOfWarehouses": str(self.max_results),
            "hasGas": "true",
            "populateWarehouseDetails": "true",
            "latitude": decimal_str(lat),
            "longitude": decimal_str(lon),
            "countryCode": "US",
        }

    def fetch_near(self, lat: float, lon: float, timeout: float = 10.0) -> List[StationPrice]:
        """
        Fetch current prices for gas-selling warehouses around (lat, lon).

        Raises:
            CollectorError: network failure, non-200 status, body that is not
                the expected JSON list, or a warehouse entry missing fields.
        """
        try:
            r = self.session.get(
                self.base_url,
                params=self.build_params(lat, lon),
                headers=self.headers,
                timeout=timeout,
            )
        except requests.RequestException as e:
            raise CollectorError(f"warehouse lookup failed: {e}") from e

        if r.status_code != 200:
            raise CollectorError(f"warehouse lookup returned {r.status_code}: {r.text[:200]}")

        try:
            body = r.json()
        except ValueError as e:
            raise CollectorError("warehouse lookup returned invalid JSON") from e
        if not isinstance(body, list) or not body:
            raise CollectorError("warehouse lookup returned an unexpected payload")

        ts = int(time.time())
        # body[0] is a bare boolean flag, warehouses follow
        rows = [parse_warehouse(obj, ts) for obj in body[1:]]
        log.info("fetched %d warehouses near %s,%s", len(rows), decimal_str(lat), decimal_str(lon))
        return rows


def _price(prices: Dict[str, Any], grade: str) -> float:
    value = prices.get(grade)
    if value is None or value == "":
        return 0.0
    return float(value)


def parse_warehouse(obj: Dict[str, Any], ts: int) -> StationPrice:
    """One warehouse object from the lookup response -> StationPrice."""
    try:
        prices = obj.get("gasPrices") or {}
        return StationPrice(
            ts=ts,
            station_id=int(obj["stlocID"]),
            name=str(obj["locationName"]),
            lat=float(obj["latitude"]),
            lon=float(obj["longitude"]),
            **{grade: _price(prices, grade) for grade in GRADES},
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CollectorError(f"malformed warehouse entry: {e!r}") from e


def _price_str(value: float) -> str:
    return decimal_str(value) if value else ""


def to_row(p: StationPrice) -> List[str]:
    return [
        str(p.ts),
        str(p.station_id),
        p.name,
        decimal_str(p.lat),
        decimal_str(p.lon),
        _price_str(p.regular),
        _price_str(p.premium),
        _price_str(p.diesel),
    ]


def write_csv(rows: Iterable[StationPrice], out: IO[str]) -> None:
    writer = csv.writer(out, lineterminator="\n")
    writer.writerows(to_row(p) for p in rows)


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = argparse.ArgumentParser(
        prog="gastrak-fetch",
        description="Print current gas prices near a coordinate pair as CSV.",
    )
    ap.add_argument("--latitude", type=finite_float, required=True, help="Search center latitude (degrees)")
    ap.add_argument("--longitude", type=finite_float, required=True, help="Search center longitude (degrees)")
    ap.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout (s)")
    ap.add_argument("--log-level", default=None, help="DEBUG/INFO/WARNING/ERROR (default: $LOG_LEVEL or INFO)")
    args = ap.parse_args(argv)

    # stdout carries the CSV
    setup_logging(args.log_level, force=True, stream=sys.stderr)

    try:
        rows = WarehouseLookupService().fetch_near(args.latitude, args.longitude, timeout=args.timeout)
    except CollectorError as e:
        log.error("%s", e)
        raise SystemExit(1)

    write_csv(rows, sys.stdout)


if __name__ == "__main__":
    main()

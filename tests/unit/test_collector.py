"""
Unit tests for the gas price collector
"""

import io
import logging
import os
import sys
from unittest.mock import Mock, patch

import pytest
import requests

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from common.types import StationPrice
from gastrak.collector import (
    CollectorError,
    WarehouseLookupService,
    main,
    parse_warehouse,
    to_row,
    write_csv,
)

PAYLOAD = [
    True,
    {
        "stlocID": 144.0,
        "locationName": "San Francisco",
        "latitude": 37.7712,
        "longitude": -122.4126,
        "gasPrices": {"regular": "4.799", "premium": "4.999"},
    },
    {
        "stlocID": 1,
        "locationName": "Daly City, CA",
        "latitude": 37.68,
        "longitude": -122.47,
        "gasPrices": {"diesel": "5.5"},
    },
]

EXPECTED_CSV = (
    "1700000000,144,San Francisco,37.7712,-122.4126,4.799,4.999,\n"
    '1700000000,1,"Daly City, CA",37.68,-122.47,,,5.5\n'
)


def _response(status_code=200, payload=None, text=""):
    r = Mock()
    r.status_code = status_code
    r.text = text
    r.json.return_value = payload
    return r


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestWarehouseLookupService:
    """Test cases for WarehouseLookupService"""

    def test_build_params(self):
        service = WarehouseLookupService(session=Mock())
        params = service.build_params(37.7749, -122.4194)
        assert params == {
            "numOfWarehouses": "50",
            "hasGas": "true",
            "populateWarehouseDetails": "true",
            "latitude": "37.7749",
            "longitude": "-122.4194",
            "countryCode": "US",
        }

    @patch("gastrak.collector.time.time", return_value=1700000000.7)
    def test_fetch_near_success(self, _mock_time):
        """Leading flag is skipped, warehouses become StationPrice rows"""
        session = Mock()
        session.get.return_value = _response(payload=PAYLOAD)
        service = WarehouseLookupService(session=session)

        rows = service.fetch_near(37.7749, -122.4194, timeout=5.0)

        assert len(rows) == 2
        assert rows[0] == StationPrice(
            ts=1700000000, station_id=144, name="San Francisco",
            lat=37.7712, lon=-122.4126, regular=4.799, premium=4.999, diesel=0.0,
        )
        assert rows[1].diesel == 5.5
        assert rows[1].regular == 0.0

        args, kwargs = session.get.call_args
        assert args[0] == "https://www.costco.com/AjaxWarehouseBrowseLookupView"
        assert kwargs["params"]["latitude"] == "37.7749"
        assert kwargs["headers"]["User-Agent"] == "Gastrak/1.0"
        assert kwargs["timeout"] == 5.0

    def test_fetch_near_http_error(self):
        session = Mock()
        session.get.return_value = _response(status_code=403, text="Access Denied")
        with pytest.raises(CollectorError, match="403"):
            WarehouseLookupService(session=session).fetch_near(1.0, 2.0)

    def test_fetch_near_network_error(self):
        session = Mock()
        session.get.side_effect = requests.ConnectionError("Network error")
        with pytest.raises(CollectorError) as exc:
            WarehouseLookupService(session=session).fetch_near(1.0, 2.0)
        assert isinstance(exc.value.__cause__, requests.ConnectionError)

    def test_fetch_near_invalid_json(self):
        session = Mock()
        r = _response()
        r.json.side_effect = ValueError("Expecting value")
        session.get.return_value = r
        with pytest.raises(CollectorError, match="invalid JSON"):
            WarehouseLookupService(session=session).fetch_near(1.0, 2.0)

    @pytest.mark.parametrize("payload", [{}, [], {"warehouses": []}])
    def test_fetch_near_unexpected_payload(self, payload):
        session = Mock()
        session.get.return_value = _response(payload=payload)
        with pytest.raises(CollectorError, match="unexpected payload"):
            WarehouseLookupService(session=session).fetch_near(1.0, 2.0)

    def test_fetch_near_only_flag(self):
        """A lone leading flag means no warehouses nearby"""
        session = Mock()
        session.get.return_value = _response(payload=[False])
        assert WarehouseLookupService(session=session).fetch_near(1.0, 2.0) == []


class TestParseWarehouse:
    """Test cases for parse_warehouse"""

    def test_missing_prices(self):
        """No gasPrices object -> all grades 0"""
        p = parse_warehouse({"stlocID": 7, "locationName": "X", "latitude": 1, "longitude": 2}, ts=5)
        assert (p.regular, p.premium, p.diesel) == (0.0, 0.0, 0.0)

    @pytest.mark.parametrize("obj", [
        {"locationName": "X", "latitude": 1, "longitude": 2},
        {"stlocID": 7, "locationName": "X", "latitude": "north", "longitude": 2},
        {"stlocID": 7, "locationName": "X", "latitude": 1, "longitude": 2, "gasPrices": {"regular": "n/a"}},
        "not an object",
    ])
    def test_malformed_entry(self, obj):
        with pytest.raises(CollectorError, match="malformed warehouse entry"):
            parse_warehouse(obj, ts=0)


class TestCsvOutput:
    """Test cases for CSV rows"""

    def test_to_row_empty_grades(self):
        p = StationPrice(ts=1, station_id=2, name="A", lat=10.0, lon=-20.5, regular=3.5)
        assert to_row(p) == ["1", "2", "A", "10", "-20.5", "3.5", "", ""]

    def test_write_csv_quotes_commas(self):
        rows = [parse_warehouse(obj, ts=1700000000) for obj in PAYLOAD[1:]]
        buf = io.StringIO()
        write_csv(rows, buf)
        assert buf.getvalue() == EXPECTED_CSV


class TestMain:
    """Command-line behavior"""

    @patch("gastrak.collector.time.time", return_value=1700000000.0)
    @patch("gastrak.collector.requests.Session")
    def test_prints_csv(self, mock_session_cls, _mock_time, capsys, restore_logging):
        mock_session_cls.return_value.get.return_value = _response(payload=PAYLOAD)

        main(["--latitude", "37.7749", "--longitude", "-122.4194"])

        out = capsys.readouterr().out
        assert out == EXPECTED_CSV

    @patch("gastrak.collector.requests.Session")
    def test_failure_exits_non_zero(self, mock_session_cls, capsys, restore_logging):
        """A failed lookup exits 1 and writes nothing to stdout"""
        mock_session_cls.return_value.get.side_effect = requests.Timeout("timed out")

        with pytest.raises(SystemExit) as exc:
            main(["--latitude", "37.7749", "--longitude", "-122.4194"])

        assert exc.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "warehouse lookup failed" in captured.err

    def test_missing_flags(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--latitude", "37.7749"])
        assert exc.value.code == 2
        assert "usage:" in capsys.readouterr().err

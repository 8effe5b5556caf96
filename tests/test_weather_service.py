"""
Tests for weather_service.py
"""

import pytest
import requests
from datetime import datetime
from unittest.mock import MagicMock
from models import SeverityLevel
from services.weather_service import (
    WeatherDataGateway,
    create_forecast_dataframe,
    forecast_records,
)
from utils.timestamps import EPOCH

WARNINGS_PAYLOAD = [
    {
        "text": "",
        "awarenessTypeName": "Agitação Marítima",
        "idAreaAviso": "LSB",
        "startTime": "2025-03-20T21:46:00",
        "awarenessLevelID": "yellow",
        "endTime": "2025-03-21T06:00:00",
    },
    {
        "text": "Ventos fortes",
        "awarenessTypeName": "Vento",
        "idAreaAviso": "PTO",
        "startTime": "2025-03-20T12:00:00",
        "awarenessLevelID": "orange",
        "endTime": "2025-03-20T23:59:00",
    },
]

FORECAST_PAYLOAD = {
    "owner": "IPMA",
    "country": "PT",
    "data": [
        {
            "precipitaProb": "2.0",
            "tMin": "9.4",
            "tMax": "18.2",
            "predWindDir": "N",
            "idWeatherType": 2,
            "classWindSpeed": 2,
            "forecastDate": "2025-03-20",
        },
        {
            "precipitaProb": "76.0",
            "tMin": "11.0",
            "tMax": "16.5",
            "predWindDir": "SW",
            "idWeatherType": 9,
            "forecastDate": "2025-03-21",
        },
    ],
    "globalIdLocal": 1110600,
    "dataUpdate": "2025-03-20T10:31:02",
}


def make_response(status_code=200, json_data=None, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}"
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


class TestWeatherDataGateway:
    """Test cases for WeatherDataGateway"""

    def setup_method(self):
        """Set up a gateway over a mocked session"""
        self.session = MagicMock()
        self.gateway = WeatherDataGateway(session=self.session)

    def test_default_session_is_pooled(self):
        """Test the gateway builds its own session when none is given"""
        gateway = WeatherDataGateway()
        assert isinstance(gateway.session, requests.Session)
        assert "https://" in gateway.session.adapters
        gateway.close()

    def test_fetch_warnings_success(self):
        self.session.get.return_value = make_response(json_data=WARNINGS_PAYLOAD)

        result = self.gateway.fetch_warnings()

        assert result.ok
        assert [r.area_id for r in result.data] == ["LSB", "PTO"]
        assert result.data[1].severity_level is SeverityLevel.ORANGE
        self.session.get.assert_called_once_with(
            "https://api.ipma.pt/open-data/forecast/warnings/warnings_www.json", timeout=None
        )

    def test_fetch_warnings_oversized_timestamp(self):
        item = dict(WARNINGS_PAYLOAD[0], startTime="99999999999999999999-01-01T00:00:00")
        self.session.get.return_value = make_response(json_data=[item])

        result = self.gateway.fetch_warnings()

        assert result.ok
        assert result.data[0].start_time == EPOCH
        assert result.data[0].end_time == datetime(2025, 3, 21, 6, 0, 0)

    def test_fetch_warnings_network_error(self):
        self.session.get.side_effect = requests.ConnectionError("connection refused")

        result = self.gateway.fetch_warnings()

        assert not result.ok
        assert result.error.reason == "NetworkError"

    def test_fetch_warnings_http_error(self):
        self.session.get.return_value = make_response(status_code=503)

        result = self.gateway.fetch_warnings()

        assert not result.ok
        assert result.error.reason == "NetworkError"
        assert "503" in result.error.message

    def test_fetch_warnings_decode_error(self):
        self.session.get.return_value = make_response(json_error=ValueError("Expecting value"))

        result = self.gateway.fetch_warnings()

        assert not result.ok
        assert result.error.reason == "DecodeError"

    def test_fetch_warnings_not_a_list(self):
        self.session.get.return_value = make_response(json_data={"error": "oops"})

        result = self.gateway.fetch_warnings()

        assert not result.ok
        assert result.error.reason == "DecodeError"

    def test_fetch_warnings_skips_non_objects(self):
        self.session.get.return_value = make_response(json_data=[1, "x", WARNINGS_PAYLOAD[0]])

        result = self.gateway.fetch_warnings()

        assert result.ok
        assert len(result.data) == 1

    def test_fetch_forecast_success(self):
        self.session.get.return_value = make_response(json_data=FORECAST_PAYLOAD)

        result = self.gateway.fetch_forecast("1110600")

        assert result.ok
        assert result.data["globalIdLocal"] == 1110600
        self.session.get.assert_called_once_with(
            "https://api.ipma.pt/open-data/forecast/meteorology/cities/daily/1110600.json",
            timeout=None,
        )

    def test_fetch_forecast_keeps_identifier_verbatim(self):
        self.session.get.return_value = make_response(json_data=FORECAST_PAYLOAD)

        self.gateway.fetch_forecast("VRL1171400")

        url = self.session.get.call_args[0][0]
        assert url.endswith("/daily/VRL1171400.json")

    def test_fetch_forecast_without_id_makes_no_request(self):
        """Test a missing identifier fails immediately"""
        result = self.gateway.fetch_forecast(None)

        assert not result.ok
        assert result.error.reason == "NoAreaId"
        self.session.get.assert_not_called()

    def test_fetch_forecast_null_body(self):
        self.session.get.return_value = make_response(json_data=None)

        result = self.gateway.fetch_forecast("1110600")

        assert not result.ok
        assert result.error.reason == "DecodeError"
        assert result.error.message == "No safety data available"
        assert result.error.empty_body is True

    def test_fetch_forecast_timeout(self):
        self.session.get.side_effect = requests.Timeout("timed out")

        result = self.gateway.fetch_forecast("1110600")

        assert not result.ok
        assert result.error.reason == "NetworkError"


class TestForecastDataFrame:
    """Test cases for the forecast table helpers"""

    def test_create_forecast_dataframe(self):
        df = create_forecast_dataframe(FORECAST_PAYLOAD)

        assert list(df["Date"]) == ["2025-03-20", "2025-03-21"]
        assert "Max Temp (°C)" in df.columns
        assert "owner" not in df.columns

    def test_missing_cells_become_none(self):
        records = forecast_records(create_forecast_dataframe(FORECAST_PAYLOAD))

        assert records[0]["Wind Speed Class"] == 2
        assert records[1]["Wind Speed Class"] is None

    def test_unknown_shape_gives_empty_table(self):
        assert create_forecast_dataframe({"unexpected": True}).empty
        assert create_forecast_dataframe([1, 2, 3]).empty
        assert forecast_records(create_forecast_dataframe(None)) == []

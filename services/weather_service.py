"""
IPMA open-data gateway for the warnings feed and daily district forecasts
"""

import logging
from typing import List, Optional

import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config import Config
from constants import FORECAST_COLUMNS, STATUS_NO_FORECAST_DATA
from exceptions import DECODE_ERROR, NETWORK_ERROR, NO_AREA_ID, FetchError
from models import FetchResult, WarningRecord
from utils.performance import monitor_performance

logger = logging.getLogger(__name__)


class WeatherDataGateway:
    """
    Fetches and decodes the IPMA feeds.

    Failures are returned as FetchResult.failure, never raised. There are
    no retries; a failed fetch is reported to the caller as-is.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.warnings_url = Config.WARNINGS_URL
        self.timeout = Config.API_TIMEOUT

        if session is None:
            session = requests.Session()

            # Connection pooling only, retries disabled
            adapter = HTTPAdapter(
                pool_connections=Config.HTTP_POOL_CONNECTIONS,
                pool_maxsize=Config.HTTP_POOL_MAXSIZE,
                max_retries=Retry(total=0, read=False),
            )
            session.mount("http://", adapter)
            session.mount("https://", adapter)

            logger.info(
                f"Connection pooling initialized with {Config.HTTP_POOL_CONNECTIONS} pools, "
                f"{Config.HTTP_POOL_MAXSIZE} max connections"
            )

        self.session = session

    def _get_json(self, url: str) -> FetchResult:
        """GET a URL and decode its body as JSON"""
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            return FetchResult.failure(FetchError(NETWORK_ERROR, str(e), url=url))

        if response.status_code != 200:
            logger.error(f"Request to {url} returned HTTP {response.status_code}")
            return FetchResult.failure(
                FetchError(NETWORK_ERROR, f"HTTP {response.status_code}", url=url)
            )

        logger.debug(f"Response received from {url}, length: {len(response.content)}")

        try:
            return FetchResult.success(response.json())
        except ValueError as e:
            logger.error(f"JSON parsing error for {url}: {e}")
            return FetchResult.failure(FetchError(DECODE_ERROR, str(e), url=url))

    @monitor_performance("ipma.fetch_warnings")
    def fetch_warnings(self) -> FetchResult:
        """
        Fetch the national warnings feed.

        Returns:
            FetchResult whose data is the list of WarningRecord in feed order
        """
        logger.info(f"Requesting warnings data from: {self.warnings_url}")
        result = self._get_json(self.warnings_url)
        if not result.ok:
            return result

        payload = result.data
        if not isinstance(payload, list):
            logger.error(f"Warnings feed is not a JSON array: {type(payload).__name__}")
            return FetchResult.failure(
                FetchError(DECODE_ERROR, "Warnings feed is not a JSON array", url=self.warnings_url)
            )

        records: List[WarningRecord] = [
            WarningRecord.from_feed(item) for item in payload if isinstance(item, dict)
        ]
        logger.info(f"Decoded {len(records)} warning records")
        return FetchResult.success(records)

    @monitor_performance("ipma.fetch_forecast")
    def fetch_forecast(self, forecast_area_id: Optional[str]) -> FetchResult:
        """
        Fetch the daily forecast for one district.

        Args:
            forecast_area_id: District forecast identifier; None fails without a request

        Returns:
            FetchResult whose data is the decoded forecast payload
        """
        if not forecast_area_id:
            return FetchResult.failure(FetchError(NO_AREA_ID, "No forecast area identifier"))

        url = Config.forecast_url(forecast_area_id)
        logger.info(f"Requesting data from: {url}")
        result = self._get_json(url)
        if result.ok and result.data is None:
            logger.error(f"Invalid response structure for {forecast_area_id}: null response")
            return FetchResult.failure(
                FetchError(DECODE_ERROR, STATUS_NO_FORECAST_DATA, url=url, empty_body=True)
            )
        return result

    def close(self):
        self.session.close()


def create_forecast_dataframe(payload) -> pd.DataFrame:
    """
    Build the daily forecast table from a forecast payload.

    Unknown payload shapes give an empty table rather than an error,
    since the forecast schema is not validated.
    """
    days = payload.get("data", []) if isinstance(payload, dict) else []
    if not isinstance(days, list):
        days = []

    df = pd.DataFrame.from_records([d for d in days if isinstance(d, dict)])
    if df.empty:
        return pd.DataFrame(columns=list(FORECAST_COLUMNS.values()))

    present = [col for col in FORECAST_COLUMNS if col in df.columns]
    df = df[present].rename(columns=FORECAST_COLUMNS)
    return df


def forecast_records(df: pd.DataFrame) -> list:
    """DataFrame rows as JSON-safe dicts (missing cells become None)"""
    if df.empty:
        return []
    return df.astype(object).where(df.notna(), None).to_dict("records")

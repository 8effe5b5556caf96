"""
Session state for district safety monitoring
"""

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from constants import (
    ALERT_GPS_ERROR_TITLE,
    ALERT_NO_LOCATION_MESSAGE,
    ALERT_NO_LOCATION_TITLE,
    ALERT_PLATFORM_MESSAGE,
    ALERT_PLATFORM_TITLE,
    MAP_URL_TEMPLATE,
    SAFE_BANNER,
    STATUS_FETCHING_FORECAST,
    STATUS_FETCHING_WARNINGS,
    STATUS_FORECAST_NETWORK_ERROR,
    STATUS_FORECAST_UPDATED,
    STATUS_GPS_ACTIVE,
    STATUS_GPS_STARTING,
    STATUS_GPS_STOPPED,
    STATUS_GPS_UNSUPPORTED,
    STATUS_GPS_UPDATED,
    STATUS_INITIAL_FETCH_FAILED,
    STATUS_INITIALIZING,
    STATUS_INVALID_JSON,
    STATUS_LOCATION_ERROR,
    STATUS_NO_FORECAST_DATA,
    STATUS_READY,
    STATUS_REFRESH_FAILED,
    STATUS_REFRESHED,
    STATUS_REFRESHING,
    STATUS_SIMULATING,
    STATUS_WARNINGS_NETWORK_ERROR,
    STATUS_WARNINGS_UPDATED,
    UNKNOWN_DISTRICT,
    UNSAFE_BANNER,
)
from exceptions import DECODE_ERROR, NETWORK_ERROR
from models import District, FetchResult, FetchStatus, LocationFix, SafetyVerdict
from services.district_service import DistrictRegistry, GeoResolver
from services.location_service import (
    AlertPresenter,
    LocationProvider,
    LoggingAlertPresenter,
    SimulatedLocations,
)
from services.safety_service import SafetyEvaluator
from services.warning_store import ForecastCache, WarningStore
from services.weather_service import WeatherDataGateway

logger = logging.getLogger(__name__)

Listener = Callable[[dict], None]


class SafetyMonitor:
    """
    Owns the state of one monitoring session: the last fix, its district,
    the warning index, the forecast cache and the current verdict.

    All mutations happen under one lock. Network fetches run outside it.
    Warning refreshes are ticketed: a completion older than the newest
    applied refresh is discarded instead of overwriting newer data.
    """

    def __init__(
        self,
        gateway: Optional[WeatherDataGateway] = None,
        registry: Optional[DistrictRegistry] = None,
        store: Optional[WarningStore] = None,
        forecast_cache: Optional[ForecastCache] = None,
        location_provider: Optional[LocationProvider] = None,
        alert_presenter: Optional[AlertPresenter] = None,
        simulator: Optional[SimulatedLocations] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.gateway = gateway or WeatherDataGateway()
        self.registry = registry or DistrictRegistry()
        self.resolver = GeoResolver(self.registry)
        self.store = store or WarningStore()
        self.forecast_cache = forecast_cache or ForecastCache()
        self.evaluator = SafetyEvaluator(self.store)
        self.location_provider = location_provider or LocationProvider()
        self.alert_presenter = alert_presenter or LoggingAlertPresenter()
        self.simulator = simulator or SimulatedLocations()
        self.clock = clock

        self._lock = threading.RLock()
        self._init_lock = threading.Lock()
        self.initialized = False
        self._listeners: List[Listener] = []
        self._issued_ticket = 0
        self._applied_ticket = 0

        self.current_fix: Optional[LocationFix] = None
        self.current_district: Optional[District] = None
        self.verdict: Optional[SafetyVerdict] = None
        self.fetch_status = FetchStatus.IDLE
        self.status_message = ""
        self.tracking = False

    # Listeners

    def add_listener(self, listener: Listener):
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener):
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self):
        with self._lock:
            listeners = list(self._listeners)
            snapshot = self.snapshot()
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Status listener failed: {e}", exc_info=True)

    def _set_status(self, message: str, fetch_status: Optional[FetchStatus] = None):
        with self._lock:
            self.status_message = message
            if fetch_status is not None:
                self.fetch_status = fetch_status
        logger.info(f"Status: {message}")
        self._notify()

    # Warnings

    def initialize(self) -> bool:
        """Fetch the warnings feed once at start-up"""
        self._set_status(STATUS_INITIALIZING)
        ok = self.refresh_warnings().ok
        self._set_status(STATUS_READY if ok else STATUS_INITIAL_FETCH_FAILED)
        return ok

    def ensure_initialized(self):
        """Run the start-up fetch once; concurrent callers wait for it to finish"""
        with self._init_lock:
            if not self.initialized:
                self.initialize()
                self.initialized = True

    def refresh_warnings(self, on_complete: Optional[Callable[[bool], None]] = None) -> FetchResult:
        """
        Fetch the warnings feed and replace the warning index.

        A failed fetch leaves the existing index untouched.

        Args:
            on_complete: Optional callback receiving the success flag

        Returns:
            The gateway's FetchResult
        """
        with self._lock:
            self._issued_ticket += 1
            ticket = self._issued_ticket
        self._set_status(STATUS_FETCHING_WARNINGS, FetchStatus.FETCHING)

        result = self.gateway.fetch_warnings()

        if result.ok:
            with self._lock:
                stale = ticket < self._applied_ticket
                newest = self._applied_ticket
                if not stale:
                    self.store.replace_all(result.data)
                    self._applied_ticket = ticket
            if stale:
                logger.info(
                    f"Discarding warnings refresh #{ticket}; #{newest} already applied"
                )
            self._set_status(STATUS_WARNINGS_UPDATED, FetchStatus.SUCCESS)
        else:
            if getattr(result.error, "reason", None) == DECODE_ERROR:
                message = STATUS_INVALID_JSON
            else:
                message = STATUS_WARNINGS_NETWORK_ERROR
            self._set_status(message, FetchStatus.ERROR)

        if on_complete:
            on_complete(result.ok)
        return result

    def refresh_all(self) -> bool:
        """Refresh warnings and re-evaluate the last known fix"""
        self._set_status(STATUS_REFRESHING)
        if not self.refresh_warnings().ok:
            self._set_status(STATUS_REFRESH_FAILED)
            return False

        self._set_status(STATUS_REFRESHED)
        with self._lock:
            fix = self.current_fix
        if fix is not None:
            self._apply_fix(fix)
        return True

    # Forecasts

    def refresh_forecast(self, forecast_area_id: Optional[str] = None) -> FetchResult:
        """
        Fetch a district forecast into the forecast cache.

        Args:
            forecast_area_id: Defaults to the current district's forecast id

        Returns:
            The gateway's FetchResult
        """
        if forecast_area_id is None:
            with self._lock:
                district = self.current_district
            forecast_area_id = district.forecast_area_id if district else None

        if not forecast_area_id:
            return self.gateway.fetch_forecast(None)

        self._set_status(STATUS_FETCHING_FORECAST, FetchStatus.FETCHING)
        result = self.gateway.fetch_forecast(forecast_area_id)

        if result.ok:
            self.forecast_cache.put(forecast_area_id, result.data)
            self._set_status(STATUS_FORECAST_UPDATED, FetchStatus.SUCCESS)
        elif result.error.reason == NETWORK_ERROR:
            self._set_status(STATUS_FORECAST_NETWORK_ERROR, FetchStatus.ERROR)
        elif result.error.empty_body:
            self._set_status(STATUS_NO_FORECAST_DATA, FetchStatus.ERROR)
        else:
            self._set_status(STATUS_INVALID_JSON, FetchStatus.ERROR)
        return result

    # Location

    def update_location(self, fix: LocationFix, status_message: str = STATUS_GPS_UPDATED) -> dict:
        """Accept a new fix, resolve its district and evaluate safety"""
        self._set_status(status_message)
        self._apply_fix(fix)
        return self.snapshot()

    def _apply_fix(self, fix: LocationFix):
        # Held across evaluation so an index swap cannot land between lookup and assignment
        with self._lock:
            district = self.resolver.resolve(fix.latitude, fix.longitude)
            area_id = district.warning_area_id if district else None
            verdict = self.evaluator.evaluate(area_id, self.clock())
            self.current_fix = fix
            self.current_district = district
            self.verdict = verdict

        name = district.name if district else UNKNOWN_DISTRICT
        if verdict.is_safe:
            logger.info(f"Good news! You are in a SAFE district: {name}")
        else:
            logger.warning(f"Warning! You are in an UNSAFE district: {name}")
        self._notify()

    def handle_location_error(self, error_code: Optional[int], error_message: str):
        """Surface a location-provider error to the user"""
        logger.warning(f"Location error {error_code}: {error_message}")
        self._set_status(STATUS_LOCATION_ERROR.format(message=error_message))
        self.alert_presenter.show(ALERT_GPS_ERROR_TITLE, error_message)

    def simulate_location(self) -> dict:
        name, fix = self.simulator.pick()
        return self.update_location(fix, STATUS_SIMULATING.format(name=name))

    def start_tracking(self) -> bool:
        """Subscribe to the location provider"""
        if not self.location_provider.supported:
            self._set_status(STATUS_GPS_UNSUPPORTED)
            self.alert_presenter.show(ALERT_PLATFORM_TITLE, ALERT_PLATFORM_MESSAGE)
            return False

        self._set_status(STATUS_GPS_STARTING)
        self.location_provider.subscribe(self.update_location, self.handle_location_error)
        with self._lock:
            self.tracking = True
        self._set_status(STATUS_GPS_ACTIVE)
        return True

    def stop_tracking(self):
        self.location_provider.unsubscribe(self.update_location, self.handle_location_error)
        with self._lock:
            self.tracking = False
        self._set_status(STATUS_GPS_STOPPED)

    def map_link(self) -> Optional[str]:
        """Map URL for the last fix; alerts the user when there is none"""
        with self._lock:
            fix = self.current_fix
        if fix is None:
            self.alert_presenter.show(ALERT_NO_LOCATION_TITLE, ALERT_NO_LOCATION_MESSAGE)
            return None
        return MAP_URL_TEMPLATE.format(lat=fix.latitude, lon=fix.longitude)

    # Presentation

    def snapshot(self) -> dict:
        """State handed to the presentation layer"""
        with self._lock:
            fix = self.current_fix
            district = self.current_district
            verdict = self.verdict

            data = {
                "status": self.fetch_status.value,
                "message": self.status_message,
                "tracking": self.tracking,
                "location": fix.to_dict() if fix else None,
                "district": district.name if district else UNKNOWN_DISTRICT,
                "forecast_area_id": district.forecast_area_id if district else None,
                "warning_area_id": district.warning_area_id if district else None,
                "is_safe": None,
                "reason": None,
                "level": None,
                "indicator": None,
                "banner": None,
                "map_url": None,
                "warnings_updated": (
                    self.store.last_updated.isoformat() if self.store.last_updated else None
                ),
            }

        if fix is not None:
            data["map_url"] = MAP_URL_TEMPLATE.format(lat=fix.latitude, lon=fix.longitude)

        if verdict is not None:
            data["is_safe"] = verdict.is_safe
            data["reason"] = verdict.reason
            data["level"] = verdict.level.value if verdict.level else None
            data["indicator"] = "red" if verdict.level and verdict.level.is_unsafe else "green"
            data["banner"] = SAFE_BANNER if verdict.is_safe else UNSAFE_BANNER

        return data

"""
Location and alert collaborators at the edge of the safety core
"""

import logging
import random
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from constants import SIMULATED_LOCATIONS
from models import LocationFix

logger = logging.getLogger(__name__)

FixListener = Callable[[LocationFix], None]
ErrorListener = Callable[[Optional[int], str], None]


class AlertPresenter(ABC):
    """Fire-and-forget user notification"""

    @abstractmethod
    def show(self, title: str, message: str):
        pass


class LoggingAlertPresenter(AlertPresenter):
    """Records alerts so an API client can poll and display them"""

    def __init__(self, max_alerts: int = 20):
        self.max_alerts = max_alerts
        self._alerts: List[dict] = []
        self._lock = threading.Lock()

    def show(self, title: str, message: str):
        logger.warning(f"ALERT: {title} - {message}")
        with self._lock:
            self._alerts.append({"title": title, "message": message})
            del self._alerts[: -self.max_alerts]

    def pending(self) -> List[dict]:
        """Alerts shown since the last call, oldest first"""
        with self._lock:
            alerts, self._alerts = self._alerts, []
        return alerts


class LocationProvider:
    """
    Push-style source of location fixes.

    Devices (or the API layer on their behalf) publish fixes and errors;
    subscribers receive them synchronously in subscription order.
    """

    def __init__(self, supported: bool = True):
        self.supported = supported
        self._fix_listeners: List[FixListener] = []
        self._error_listeners: List[ErrorListener] = []
        self._lock = threading.Lock()

    def subscribe(self, on_fix: FixListener, on_error: Optional[ErrorListener] = None):
        with self._lock:
            if on_fix not in self._fix_listeners:
                self._fix_listeners.append(on_fix)
            if on_error and on_error not in self._error_listeners:
                self._error_listeners.append(on_error)

    def unsubscribe(self, on_fix: FixListener, on_error: Optional[ErrorListener] = None):
        with self._lock:
            if on_fix in self._fix_listeners:
                self._fix_listeners.remove(on_fix)
            if on_error and on_error in self._error_listeners:
                self._error_listeners.remove(on_error)

    @property
    def has_subscribers(self) -> bool:
        with self._lock:
            return bool(self._fix_listeners)

    def publish(self, fix: LocationFix) -> int:
        """Deliver a fix; returns the number of listeners reached"""
        with self._lock:
            listeners = list(self._fix_listeners)
        for listener in listeners:
            listener(fix)
        return len(listeners)

    def publish_error(self, error_code: Optional[int], error_message: str) -> int:
        with self._lock:
            listeners = list(self._error_listeners)
        for listener in listeners:
            listener(error_code, error_message)
        return len(listeners)


class SimulatedLocations:
    """Picks one of the predefined Portuguese cities at random"""

    def __init__(self, locations=None, rng: Optional[random.Random] = None):
        self.locations = dict(locations or SIMULATED_LOCATIONS)
        self.rng = rng or random.Random()

    def pick(self) -> Tuple[str, LocationFix]:
        name = self.rng.choice(list(self.locations))
        lat, lon = self.locations[name]
        return name, LocationFix(latitude=lat, longitude=lon, source="simulated")

"""
District registry and coordinate-to-district resolution
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from models import DISTRICTS, District

logger = logging.getLogger(__name__)


class DistrictRegistry:
    """Static, ordered table of districts; read-only after construction"""

    def __init__(self, districts: Sequence[District] = DISTRICTS):
        if not districts:
            raise ValueError("District registry cannot be empty")
        self._districts: Tuple[District, ...] = tuple(districts)
        self._by_name = {}
        for district in self._districts:
            self._by_name.setdefault(district.name.lower(), district)

        duplicates = self.duplicate_codes()
        for code, names in duplicates.items():
            logger.warning(f"Warning area code {code} is shared by: {', '.join(names)}")

    def all_districts(self) -> Tuple[District, ...]:
        """Every district, in registration order"""
        return self._districts

    def get_by_name(self, name: str) -> Optional[District]:
        if not name or not isinstance(name, str):
            return None
        return self._by_name.get(name.strip().lower())

    def find_by_warning_area(self, area_id: str) -> List[District]:
        """All districts mapped to a warning area (more than one for shared codes)"""
        return [d for d in self._districts if d.warning_area_id == area_id]

    def duplicate_codes(self) -> Dict[str, List[str]]:
        """Warning area codes used by more than one district"""
        names_by_code = defaultdict(list)
        for district in self._districts:
            if district.warning_area_id:
                names_by_code[district.warning_area_id].append(district.name)
        return {code: names for code, names in names_by_code.items() if len(names) > 1}

    def __len__(self) -> int:
        return len(self._districts)

    def __iter__(self):
        return iter(self._districts)


class GeoResolver:
    """Maps coordinates to the first registered district whose box contains them"""

    def __init__(self, registry: DistrictRegistry):
        self.registry = registry

    def resolve(self, lat: float, lon: float) -> Optional[District]:
        """
        Find the district containing a point.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            The earliest-registered matching district, or None when the
            point lies outside every box
        """
        for district in self.registry.all_districts():
            if district.contains(lat, lon):
                return district

        logger.debug(f"No district contains ({lat}, {lon})")
        return None

"""
Tests for district_service.py
"""

import pytest
from models import District
from services.district_service import DistrictRegistry, GeoResolver


class TestDistrictRegistry:
    """Test cases for DistrictRegistry"""

    def setup_method(self):
        self.registry = DistrictRegistry()

    def test_all_districts_in_order(self):
        """Test the registry keeps registration order"""
        names = [d.name for d in self.registry.all_districts()]
        assert names[0] == "Lisboa"
        assert names[-1] == "Viana do Castelo"
        assert len(self.registry) == 18

    def test_get_by_name(self):
        assert self.registry.get_by_name("porto").forecast_area_id == "1131200"
        assert self.registry.get_by_name(" Évora ").warning_area_id == "EVR"
        assert self.registry.get_by_name("Madrid") is None
        assert self.registry.get_by_name(None) is None

    def test_duplicate_codes(self):
        """Test the shared CBR warning area is reported"""
        assert self.registry.duplicate_codes() == {"CBR": ["Coimbra", "Castelo Branco"]}

    def test_find_by_warning_area(self):
        names = [d.name for d in self.registry.find_by_warning_area("CBR")]
        assert names == ["Coimbra", "Castelo Branco"]
        assert self.registry.find_by_warning_area("XYZ") == []

    def test_empty_registry_rejected(self):
        with pytest.raises(ValueError):
            DistrictRegistry([])


class TestGeoResolver:
    """Test cases for GeoResolver"""

    def setup_method(self):
        self.resolver = GeoResolver(DistrictRegistry())

    @pytest.mark.parametrize(
        "lat,lon,expected",
        [
            (38.7223, -9.1393, "Lisboa"),
            (41.1579, -8.6291, "Porto"),
            (37.0193, -7.9304, "Faro"),
            (41.5454, -8.4265, "Braga"),
            (40.2033, -8.4103, "Coimbra"),
        ],
    )
    def test_resolve_known_cities(self, lat, lon, expected):
        """Test the simulated cities resolve to their districts"""
        assert self.resolver.resolve(lat, lon).name == expected

    def test_resolve_outside_all_districts(self):
        """Test a point in the Atlantic resolves to nothing"""
        assert self.resolver.resolve(38.0, -20.0) is None
        assert self.resolver.resolve(48.8566, 2.3522) is None

    def test_resolve_on_boundary(self):
        """Test box bounds are inclusive"""
        assert self.resolver.resolve(36.8, -9.0).name == "Faro"

    def test_overlap_first_registered_wins(self):
        """Test overlapping boxes resolve to the earliest registered district"""
        first = District("First", (10.0, 20.0), (10.0, 20.0), "1", "AAA")
        second = District("Second", (15.0, 25.0), (15.0, 25.0), "2", "BBB")

        assert GeoResolver(DistrictRegistry([first, second])).resolve(17.0, 17.0) is first
        assert GeoResolver(DistrictRegistry([second, first])).resolve(17.0, 17.0) is second

    def test_overlap_in_real_table(self):
        """Test Coimbra wins over Castelo Branco where their boxes overlap"""
        assert self.resolver.resolve(40.0, -7.9).name == "Coimbra"

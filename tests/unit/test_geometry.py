"""座標の検証・距離・表示のテスト"""

import math

import pytest

from placelists.features.location.domain.enums import LocationSource
from placelists.features.location.domain.models import Coordinate
from placelists.features.location.utils.geometry import (
    format_coordinate,
    haversine_distance_km,
    is_finite_number,
    validate_coordinate,
)

NEW_YORK = Coordinate(lat=40.7128, lng=-74.006)
LONDON = Coordinate(lat=51.5074, lng=-0.1278)


@pytest.mark.unit
class TestValidateCoordinate:
    """validate_coordinate()"""

    @pytest.mark.parametrize(
        "lat,lng",
        [(0, 0), (90, 180), (-90, -180), (47.25, -122.44), (45, 0)],
    )
    def test_valid(self, lat, lng) -> None:
        """範囲内（境界と(0, 0)を含む）"""
        assert validate_coordinate(lat, lng) is True

    @pytest.mark.parametrize(
        "lat,lng",
        [
            (90.0001, 0),
            (-90.5, 0),
            (0, 180.0001),
            (0, -181),
            (math.nan, 0),
            (0, math.inf),
            ("47.25", "-122.44"),
            (None, 10),
            (True, 10),
        ],
    )
    def test_invalid(self, lat, lng) -> None:
        """範囲外・非有限・数値以外"""
        assert validate_coordinate(lat, lng) is False

    def test_is_finite_number(self) -> None:
        """boolは数値として扱わない"""
        assert is_finite_number(1.5) is True
        assert is_finite_number(False) is False
        assert is_finite_number(-math.inf) is False


@pytest.mark.unit
class TestHaversineDistance:
    """haversine_distance_km()"""

    def test_same_point_is_zero(self) -> None:
        """同一地点は0"""
        assert haversine_distance_km(NEW_YORK, NEW_YORK) == 0.0

    def test_symmetric(self) -> None:
        """順序によらない"""
        assert haversine_distance_km(NEW_YORK, LONDON) == pytest.approx(
            haversine_distance_km(LONDON, NEW_YORK)
        )

    def test_new_york_to_london(self) -> None:
        """ニューヨーク〜ロンドンは約5570km"""
        assert haversine_distance_km(NEW_YORK, LONDON) == pytest.approx(5570, rel=0.01)

    def test_one_degree_of_latitude(self) -> None:
        """緯度1度は約111.19km"""
        a = Coordinate(lat=0, lng=0)
        b = Coordinate(lat=1, lng=0)
        assert haversine_distance_km(a, b) == pytest.approx(111.19, abs=0.01)

    def test_antipodal_points(self) -> None:
        """対蹠点は半周（丸め誤差で失敗しない）"""
        a = Coordinate(lat=0, lng=0)
        b = Coordinate(lat=0, lng=180)
        assert haversine_distance_km(a, b) == pytest.approx(math.pi * 6371.0)


@pytest.mark.unit
class TestFormatCoordinate:
    """format_coordinate()"""

    def test_default_precision(self) -> None:
        """既定は小数点以下6桁"""
        assert format_coordinate(NEW_YORK) == "40.712800, -74.006000"

    def test_custom_precision(self) -> None:
        """桁数指定"""
        assert format_coordinate(NEW_YORK, precision=2) == "40.71, -74.01"


@pytest.mark.unit
class TestCoordinateModel:
    """Coordinate"""

    def test_null_island(self) -> None:
        """(0, 0) の判定"""
        assert Coordinate(lat=0, lng=0).is_null_island is True
        assert NEW_YORK.is_null_island is False

    def test_with_address_returns_copy(self) -> None:
        """住所付きのコピー"""
        located = NEW_YORK.with_address("New York, NY")
        assert located.address == "New York, NY"
        assert NEW_YORK.address is None

    def test_to_dict(self) -> None:
        """永続化用の辞書"""
        data = Coordinate(lat=1.5, lng=2.5, accuracy_meters=10.0, source=LocationSource.MAP_CLICK).to_dict()
        assert data == {
            "lat": 1.5,
            "lng": 2.5,
            "accuracy": 10.0,
            "source": "map-click",
            "timestamp": None,
            "address": None,
            "name": None,
            "type": None,
        }

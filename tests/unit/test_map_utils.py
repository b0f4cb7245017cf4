"""地図表示ユーティリティのテスト"""

import pytest

from placelists.features.location.domain.models import Coordinate
from placelists.features.location.utils.map_utils import (
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    SINGLE_PLACE_ZOOM,
    calculate_bounds,
    calculate_optimal_map_view,
    embedded_map_url,
    lat_lng_to_tile,
    miles_to_degrees,
    static_map_tile_url,
)


@pytest.mark.unit
class TestTiles:
    """タイル番号・URL"""

    def test_origin_at_zoom_one(self) -> None:
        """(0, 0) はズーム1で (1, 1)"""
        assert lat_lng_to_tile(0.0, 0.0, 1) == (1, 1)

    def test_zoom_zero_has_single_tile(self) -> None:
        """ズーム0は1枚"""
        assert lat_lng_to_tile(40.7128, -74.006, 0) == (0, 0)

    def test_edges_are_clamped(self) -> None:
        """経度180度・極付近はタイル範囲内に丸める"""
        assert lat_lng_to_tile(90.0, 180.0, 2) == (3, 0)
        assert lat_lng_to_tile(-90.0, -180.0, 2) == (0, 3)

    def test_static_tile_url(self) -> None:
        """タイル画像のURL"""
        url = static_map_tile_url(Coordinate(lat=0.0, lng=0.0), zoom=1)

        assert url == "https://tile.openstreetmap.org/1/1/1.png"

    def test_embedded_map_url(self) -> None:
        """埋め込み地図のURL"""
        url = embedded_map_url(Coordinate(lat=10.0, lng=20.0), bbox_degrees=0.5)

        assert url == (
            "https://www.openstreetmap.org/export/embed.html"
            "?bbox=19.5,9.5,20.5,10.5&layer=mapnik&marker=10.0,20.0"
        )

    def test_miles_to_degrees(self) -> None:
        """マイル→度"""
        assert miles_to_degrees(10) == pytest.approx(0.14)


@pytest.mark.unit
class TestMapView:
    """calculate_optimal_map_view()"""

    def test_no_places(self) -> None:
        """場所なしは既定の表示"""
        view = calculate_optimal_map_view([], 800, 600)

        assert view.center == DEFAULT_CENTER
        assert view.zoom == DEFAULT_ZOOM

    def test_single_place(self) -> None:
        """1件はその場所を中心に"""
        view = calculate_optimal_map_view([Coordinate(lat=47.25, lng=-122.44)], 800, 600)

        assert view.center == (47.25, -122.44)
        assert view.zoom == SINGLE_PLACE_ZOOM

    def test_multiple_places(self) -> None:
        """複数件は範囲の中心"""
        places = [Coordinate(lat=47.0, lng=-123.0), Coordinate(lat=48.0, lng=-122.0)]

        view = calculate_optimal_map_view(places, 800, 600)

        assert view.center == (47.5, -122.5)
        assert 2 <= view.zoom <= 16
        # 1.4度四方を横長の800x600に合わせて広げた経度幅で決まる
        assert view.zoom == 7

    def test_identical_places_use_max_zoom(self) -> None:
        """同一地点のみなら最大ズーム"""
        places = [Coordinate(lat=10.0, lng=10.0), Coordinate(lat=10.0, lng=10.0)]

        assert calculate_optimal_map_view(places, 400, 400).zoom == 16

    def test_world_wide_places_use_min_zoom(self) -> None:
        """世界中に散らばる場合は最小ズーム"""
        places = [Coordinate(lat=-80.0, lng=-179.0), Coordinate(lat=80.0, lng=179.0)]

        assert calculate_optimal_map_view(places, 400, 400).zoom == 2

    def test_bounds(self) -> None:
        """範囲"""
        bounds = calculate_bounds([Coordinate(lat=1.0, lng=5.0), Coordinate(lat=-2.0, lng=3.0)])

        assert (bounds.south, bounds.west, bounds.north, bounds.east) == (-2.0, 3.0, 1.0, 5.0)

    def test_bounds_of_nothing(self) -> None:
        """空の範囲はエラー"""
        with pytest.raises(ValueError):
            calculate_bounds([])

    @pytest.mark.parametrize("width,height", [(800, 0), (0, 600), (-1, 600)])
    def test_invalid_container_size(self, width, height) -> None:
        """幅・高さが0以下"""
        places = [Coordinate(lat=47.0, lng=-123.0), Coordinate(lat=48.0, lng=-122.0)]

        with pytest.raises(ValueError):
            calculate_optimal_map_view(places, width, height)

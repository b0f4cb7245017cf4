"""地図表示用のユーティリティ（タイルURL、埋め込みURL、表示範囲の計算）"""

import math
from dataclasses import dataclass
from typing import Sequence

from ..domain.models import Coordinate

OSM_TILE_URL = "https://tile.openstreetmap.org/{zoom}/{x}/{y}.png"
OSM_EMBED_URL = "https://www.openstreetmap.org/export/embed.html"

# 場所がない場合の既定表示（ニューヨーク）
DEFAULT_CENTER = (40.7128, -74.006)
DEFAULT_ZOOM = 13
SINGLE_PLACE_ZOOM = 15

# Webメルカトルで表示できる緯度の上限
MAX_MERCATOR_LATITUDE = 85.05112878

# 1マイルあたりの度数（中緯度での概算）
DEGREES_PER_MILE = 0.014

# 全点が同じ位置の場合に使う最小スパン（度）
_MIN_SPAN_DEGREES = 1e-4


@dataclass(frozen=True)
class BoundingBox:
    """表示範囲（度）"""

    south: float
    west: float
    north: float
    east: float

    @property
    def center(self) -> tuple[float, float]:
        return ((self.south + self.north) / 2, (self.west + self.east) / 2)


@dataclass(frozen=True)
class MapView:
    """地図の中心とズームレベル"""

    center: tuple[float, float]
    zoom: int


def lat_lng_to_tile(lat: float, lng: float, zoom: int) -> tuple[int, int]:
    """
    緯度経度をスリッピーマップのタイル番号に変換

    Returns:
        tuple[int, int]: (x, y)
    """
    lat = max(-MAX_MERCATOR_LATITUDE, min(MAX_MERCATOR_LATITUDE, lat))
    n = 2**zoom
    lat_rad = math.radians(lat)

    x = int(math.floor((lng + 180.0) / 360.0 * n))
    y = int(math.floor((1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi) / 2.0 * n))

    # 経度180度・緯度の上限はタイル範囲外になるため丸める
    return (min(max(x, 0), n - 1), min(max(y, 0), n - 1))


def static_map_tile_url(coordinate: Coordinate, zoom: int = SINGLE_PLACE_ZOOM) -> str:
    """座標を含むOpenStreetMapタイル画像のURL"""
    x, y = lat_lng_to_tile(coordinate.lat, coordinate.lng, zoom)
    return OSM_TILE_URL.format(zoom=zoom, x=x, y=y)


def embedded_map_url(coordinate: Coordinate, bbox_degrees: float = 0.01) -> str:
    """
    iframe埋め込み用のOpenStreetMap URL（中心にマーカー付き）

    bbox_degrees の既定値 0.01 は約0.25マイル四方
    """
    west = coordinate.lng - bbox_degrees
    south = coordinate.lat - bbox_degrees
    east = coordinate.lng + bbox_degrees
    north = coordinate.lat + bbox_degrees

    return (
        f"{OSM_EMBED_URL}?bbox={west},{south},{east},{north}"
        f"&layer=mapnik&marker={coordinate.lat},{coordinate.lng}"
    )


def miles_to_degrees(miles: float) -> float:
    """マイルをおおよその度数に変換（範囲計算用の概算）"""
    return miles * DEGREES_PER_MILE


def calculate_bounds(coordinates: Sequence[Coordinate]) -> BoundingBox:
    """
    座標群を囲む範囲を計算

    Raises:
        ValueError: 座標が空の場合
    """
    if not coordinates:
        raise ValueError("Cannot calculate bounds of an empty coordinate list")

    lats = [c.lat for c in coordinates]
    lngs = [c.lng for c in coordinates]
    return BoundingBox(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))


def calculate_optimal_map_view(
    coordinates: Sequence[Coordinate],
    container_width: float,
    container_height: float,
    min_zoom: int = 2,
    max_zoom: int = 16,
) -> MapView:
    """
    コンテナの縦横比に合わせて、全座標が収まる中心とズームを計算

    余白として範囲を1.4倍に広げ、コンテナより横長・縦長な分だけ
    もう一方の軸を広げてからズームを決める（地図の灰色帯を避ける）

    Args:
        coordinates: 表示する座標
        container_width: 地図コンテナの幅（px）
        container_height: 地図コンテナの高さ（px）
        min_zoom: 最小ズーム
        max_zoom: 最大ズーム

    Returns:
        MapView: 中心とズーム

    Raises:
        ValueError: コンテナの幅・高さが正の数でない場合
    """
    if not (container_width > 0 and container_height > 0):
        raise ValueError(
            f"Container size must be positive: {container_width}x{container_height}"
        )

    if not coordinates:
        return MapView(center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM)

    if len(coordinates) == 1:
        return MapView(center=coordinates[0].to_tuple(), zoom=SINGLE_PLACE_ZOOM)

    bounds = calculate_bounds(coordinates)

    padded_lat_span = max(bounds.north - bounds.south, _MIN_SPAN_DEGREES) * 1.4
    padded_lng_span = max(bounds.east - bounds.west, _MIN_SPAN_DEGREES) * 1.4

    container_aspect_ratio = container_width / container_height
    data_aspect_ratio = padded_lng_span / padded_lat_span

    final_lat_span = padded_lat_span
    final_lng_span = padded_lng_span

    if data_aspect_ratio > container_aspect_ratio:
        final_lat_span = padded_lng_span / container_aspect_ratio
    else:
        final_lng_span = padded_lat_span * container_aspect_ratio

    lat_zoom = math.log2(360 / final_lat_span)
    lng_zoom = math.log2(360 / final_lng_span)
    zoom = max(min_zoom, min(max_zoom, math.floor(min(lat_zoom, lng_zoom))))

    return MapView(center=bounds.center, zoom=zoom)

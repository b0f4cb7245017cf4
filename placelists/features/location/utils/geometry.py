"""座標の検証・距離計算・表示用ユーティリティ"""

import math
from numbers import Real
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import Coordinate

# 地球の半径（km）
EARTH_RADIUS_KM = 6371.0

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


def is_finite_number(value: object) -> bool:
    """有限の実数かどうか（boolは除外）"""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(float(value))


def validate_coordinate(lat: object, lng: object) -> bool:
    """
    座標が有効かどうかを判定

    両方が有限の実数で、緯度が[-90, 90]、経度が[-180, 180]の範囲内ならTrue。
    (0, 0) はここでは拒否しない（呼び出し側で Coordinate.is_null_island を確認する）。

    Args:
        lat: 緯度
        lng: 経度

    Returns:
        bool: 有効な場合True
    """
    if not (is_finite_number(lat) and is_finite_number(lng)):
        return False

    return (
        MIN_LATITUDE <= float(lat) <= MAX_LATITUDE
        and MIN_LONGITUDE <= float(lng) <= MAX_LONGITUDE
    )


def haversine_distance_km(a: "Coordinate", b: "Coordinate") -> float:
    """
    2点間の大円距離をハーバーサイン公式で計算

    Args:
        a: 座標1
        b: 座標2

    Returns:
        float: 距離（km）
    """
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    # 対蹠点付近の丸め誤差で1を超えることがある
    h = min(1.0, h)

    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def format_coordinate(coordinate: "Coordinate", precision: int = 6) -> str:
    """
    座標を表示用の文字列に変換

    例: "40.712800, -74.006000"
    """
    return f"{coordinate.lat:.{precision}f}, {coordinate.lng:.{precision}f}"

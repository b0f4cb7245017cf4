"""ジオコーディング機能のドメインモデル"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class GeoLocation:
    """ジオコーディングサービスが返す地理的位置情報"""

    latitude: float  # 緯度
    longitude: float  # 経度
    formatted_address: Optional[str] = None  # 正規化された住所
    place_id: Optional[str] = None  # プロバイダー側のID（オプション）
    name: Optional[str] = None  # 施設名（場所検索の場合）
    types: list[str] = field(default_factory=list)  # 場所の種別

    def __repr__(self) -> str:
        return f"GeoLocation(lat={self.latitude}, lng={self.longitude})"

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.latitude, self.longitude)

    @property
    def place_type(self) -> str:
        """表示用の場所種別"""
        return place_type_from_google_types(self.types)


# Google Places の types → 表示用種別（先に一致したものを優先）
_PLACE_TYPE_RULES: list[tuple[tuple[str, ...], str]] = [
    (("restaurant",), "restaurant"),
    (("cafe",), "cafe"),
    (("bar",), "bar"),
    (("lodging",), "hotel"),
    (("park",), "park"),
    (("museum",), "museum"),
    (("store", "shop"), "shop"),
    (("airport",), "airport"),
    (("train_station", "bus_station", "subway_station"), "station"),
    (("point_of_interest",), "attraction"),
    (("establishment",), "business"),
    (("locality", "administrative_area_level_1"), "city"),
]


def place_type_from_google_types(types: list[str]) -> str:
    """
    Google Places の types から表示用の場所種別を決定

    Args:
        types: ["cafe", "food", "point_of_interest", ...]

    Returns:
        str: "restaurant", "cafe", ... 一致しない場合は "place"
    """
    for candidates, place_type in _PLACE_TYPE_RULES:
        if any(candidate in types for candidate in candidates):
            return place_type
    return "place"

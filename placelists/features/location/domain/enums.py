"""位置情報機能のEnum定義"""
from enum import Enum


class LocationSource(str, Enum):
    """座標の取得元"""

    PHOTO = "photo"  # 写真のEXIF
    CURRENT_DEVICE = "current-device"  # 端末の位置情報
    MAP_CLICK = "map-click"  # 地図上のクリック
    TEXT_SEARCH = "text-search"  # テキスト検索
    MANUAL_ENTRY = "manual-entry"  # 手入力
    ADDRESS_LOOKUP = "address-lookup"  # 住所のジオコーディング
    URL_EXTRACT = "url-extract"  # 地図・ページURLからの抽出


class Hemisphere(str, Enum):
    """半球参照（EXIFのGPSLatitudeRef / GPSLongitudeRef）"""

    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def is_negative(self) -> bool:
        """南緯・西経かどうか"""
        return self in (Hemisphere.SOUTH, Hemisphere.WEST)

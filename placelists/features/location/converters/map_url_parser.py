"""地図URLから座標・検索語を抽出"""

import re
from typing import Optional
from urllib.parse import unquote_plus

from ....shared.logging.config import get_logger
from ....shared.utils.text import normalize_text
from ..utils.geometry import validate_coordinate

logger = get_logger(__name__)

_NUMBER = r"(-?\d+(?:\.\d+)?)"

# Google Maps のURL形式ごとの座標パターン（上から順に試す）
COORDINATE_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("@pattern", re.compile(rf"@{_NUMBER},{_NUMBER}")),
    ("!3d pattern", re.compile(rf"!3d{_NUMBER}!4d{_NUMBER}")),
    ("ll pattern", re.compile(rf"[?&]ll={_NUMBER},{_NUMBER}")),
    ("center pattern", re.compile(rf"[?&]center={_NUMBER},{_NUMBER}")),
    ("q pattern with coords", re.compile(rf"[?&]q={_NUMBER}(?:,|%2C){_NUMBER}", re.IGNORECASE)),
]

QUERY_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("q pattern", re.compile(r"[?&]q=([^&#]+)")),
    ("query pattern", re.compile(r"[?&]query=([^&#]+)")),
    ("place pattern", re.compile(r"/place/([^/?#]+)")),
    ("search pattern", re.compile(r"/search/([^/?#]+)")),
]

_LEADING_COORDINATES = re.compile(r"^-?\d+(?:\.\d+)?,\s*-?\d+(?:\.\d+)?")

_MAPS_URL_MARKERS = ("google.com/maps", "goo.gl/maps", "maps.app.goo.gl", "maps.google.")
_SHORT_URL_MARKERS = ("goo.gl/maps", "maps.app.goo.gl")


def is_google_maps_url(url: str) -> bool:
    """Google MapsのURLかどうか"""
    return any(marker in url for marker in _MAPS_URL_MARKERS)


def is_short_maps_url(url: str) -> bool:
    """Google Mapsの短縮URLかどうか（展開が必要）"""
    return any(marker in url for marker in _SHORT_URL_MARKERS)


def extract_coordinates_from_url(url: str) -> Optional[tuple[float, float]]:
    """
    URLに埋め込まれた座標を抽出

    例:
    - https://www.google.com/maps/place/Foo/@47.2529,-122.4443,15z
    - https://www.google.com/maps/place/.../data=!3d47.2529!4d-122.4443
    - https://maps.google.com/?ll=47.2529,-122.4443

    Returns:
        Optional[tuple[float, float]]: (緯度, 経度)。見つからない・範囲外の場合はNone
    """
    for name, pattern in COORDINATE_PATTERNS:
        match = pattern.search(url)
        if not match:
            continue

        lat = float(match.group(1))
        lng = float(match.group(2))

        if validate_coordinate(lat, lng):
            logger.debug(f"Found coordinates using {name}: ({lat}, {lng})")
            return (lat, lng)

        logger.debug(f"Ignoring out-of-range coordinates from {name}: ({lat}, {lng})")

    return None


def extract_query_from_url(url: str) -> Optional[str]:
    """
    URLから検索語（場所名・住所）を抽出

    先頭に座標が含まれている場合は取り除く。空になった場合は次のパターンを試す。
    """
    for name, pattern in QUERY_PATTERNS:
        match = pattern.search(url)
        if not match:
            continue

        query = unquote_plus(match.group(1))
        query = normalize_text(_LEADING_COORDINATES.sub("", query))

        if query:
            logger.debug(f"Found query using {name}: {query}")
            return query

    return None

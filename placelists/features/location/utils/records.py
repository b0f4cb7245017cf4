"""保存済みの場所レコードから座標を読み出す"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional

from ....shared.logging.config import get_logger
from ....shared.utils.text import parse_float
from ..domain.models import Coordinate
from .geometry import validate_coordinate

logger = get_logger(__name__)

# 座標を持つフィールド名の組（上から順に試す）
_FIELD_PAIRS = [("lat", "lng"), ("latitude", "longitude"), ("lat", "lon")]


def coordinate_from_record(record: Mapping[str, Any]) -> Optional[Coordinate]:
    """
    場所レコードから座標を取得

    対応する形式:
    - {"coordinates": {"lat": .., "lng": ..}}
    - {"lat": "47.25", "lng": "-122.44"}（DBの文字列カラム）
    - {"latitude": .., "longitude": ..}

    Returns:
        Optional[Coordinate]: 座標がない・不正な場合はNone
    """
    nested = record.get("coordinates")
    candidates = [nested, record] if isinstance(nested, Mapping) else [record]

    for candidate in candidates:
        for lat_key, lng_key in _FIELD_PAIRS:
            if lat_key not in candidate or lng_key not in candidate:
                continue

            lat = parse_float(candidate[lat_key])
            lng = parse_float(candidate[lng_key])

            if validate_coordinate(lat, lng):
                return Coordinate(lat=lat, lng=lng, address=record.get("address") or None)

            return None

    return None


def transform_place_records(records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """
    DBの場所レコードを表示用の形式に変換

    座標が不正なレコードは一覧全体を失敗させないよう、警告を出してスキップする

    Returns:
        list[dict[str, Any]]: "coordinates": {"lat", "lng"} を持つ場所のリスト
    """
    places = []

    for record in records:
        coordinate = coordinate_from_record(record)
        if coordinate is None:
            logger.warning(
                f"Skipping place {record.get('name')!r} with invalid coordinates: "
                f"lat={record.get('lat')!r}, lng={record.get('lng')!r}"
            )
            continue

        places.append(
            {
                "id": record.get("id"),
                "name": record.get("name"),
                "type": record.get("type"),
                "address": record.get("address") or "",
                "coordinates": {"lat": coordinate.lat, "lng": coordinate.lng},
                "description": record.get("description") or "",
                "website": record.get("website_url") or "",
                "created_by": record.get("created_by"),
            }
        )

    return places

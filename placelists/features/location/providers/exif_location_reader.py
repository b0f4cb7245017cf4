"""写真のEXIFから位置情報を抽出"""

import io
from datetime import datetime
from typing import Any, Optional

from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import GPSTAGS

from ....shared.exceptions.errors import (
    GpsConversionFailed,
    GpsFormatError,
    InvalidGpsCoordinates,
    NoGpsData,
)
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import now_utc, parse_exif_datetime, parse_gps_datetime
from ..converters.gps_tag_converter import convert_gps_tag_to_decimal_degrees
from ..domain.enums import LocationSource
from ..domain.models import Coordinate
from ..utils.geometry import is_finite_number, validate_coordinate

logger = get_logger(__name__)

# EXIFタグID
EXIF_IFD_TAG = 0x8769  # ExifOffset
GPS_IFD_TAG = 0x8825  # GPSInfo
DATETIME_TAG = 0x0132  # DateTime
DATETIME_ORIGINAL_TAG = 0x9003  # DateTimeOriginal


def read_gps_tags(image_bytes: bytes) -> dict[str, Any]:
    """
    画像バイト列からGPSタグを読み出す

    Args:
        image_bytes: 画像ファイルのバイト列

    Returns:
        dict[str, Any]: タグ名（"GPSLatitude"など）をキーとしたGPSタグ。
            撮影日時が取れた場合は "DateTimeOriginal" も含む

    Raises:
        NoGpsData: 画像として読めない場合
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            exif = image.getexif()
            gps_ifd = exif.get_ifd(GPS_IFD_TAG)
            exif_ifd = exif.get_ifd(EXIF_IFD_TAG)
            datetime_original = exif_ifd.get(DATETIME_ORIGINAL_TAG) or exif.get(DATETIME_TAG)
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        # PillowはEXIFの破損をSyntaxErrorで通知することがある
        raise NoGpsData(f"Could not read image metadata: {e}") from e

    tags = {GPSTAGS.get(tag_id, tag_id): value for tag_id, value in gps_ifd.items()}
    if datetime_original:
        tags["DateTimeOriginal"] = datetime_original

    logger.debug(f"Read {len(gps_ifd)} GPS tags from image")
    return tags


def location_from_gps_tags(tags: dict[str, Any]) -> Coordinate:
    """
    GPSタグから座標を生成

    Args:
        tags: read_gps_tags() の結果（またはEXIFリーダーが返す同等の辞書）

    Returns:
        Coordinate: source=photo の座標

    Raises:
        NoGpsData: 緯度・経度タグがない
        GpsConversionFailed: タグの変換に失敗
        InvalidGpsCoordinates: 範囲外、または (0, 0)
    """
    raw_lat = tags.get("GPSLatitude")
    raw_lng = tags.get("GPSLongitude")

    if raw_lat is None or raw_lng is None:
        raise NoGpsData("No GPS data found in image")

    try:
        lat = convert_gps_tag_to_decimal_degrees(raw_lat, tags.get("GPSLatitudeRef"))
        lng = convert_gps_tag_to_decimal_degrees(raw_lng, tags.get("GPSLongitudeRef"))
    except GpsFormatError as e:
        raise GpsConversionFailed(f"Failed to convert GPS tags: {e}") from e

    if not validate_coordinate(lat, lng):
        raise InvalidGpsCoordinates(
            f"GPS coordinates out of range: ({lat}, {lng})", lat=lat, lng=lng
        )

    if lat == 0 and lng == 0:
        # 測位できていないカメラが書き込む既定値
        raise InvalidGpsCoordinates(
            "GPS coordinates are (0, 0), treating as missing fix", lat=lat, lng=lng
        )

    return Coordinate(
        lat=lat,
        lng=lng,
        accuracy_meters=_positioning_error(tags.get("GPSHPositioningError")),
        source=LocationSource.PHOTO,
        captured_at=_captured_at(tags),
    )


def extract_location_from_photo(image_bytes: bytes) -> Coordinate:
    """
    画像バイト列から撮影位置を抽出

    Raises:
        NoGpsData, GpsConversionFailed, InvalidGpsCoordinates
    """
    tags = read_gps_tags(image_bytes)
    coordinate = location_from_gps_tags(tags)

    logger.debug(f"Extracted photo location: ({coordinate.lat}, {coordinate.lng})")
    return coordinate


def _positioning_error(value: Any) -> Optional[float]:
    if not is_finite_number(value) or float(value) < 0:
        return None
    return float(value)


def _captured_at(tags: dict[str, Any]) -> datetime:
    return (
        parse_gps_datetime(tags.get("GPSDateStamp"), tags.get("GPSTimeStamp"))
        or parse_exif_datetime(tags.get("DateTimeOriginal"))
        or now_utc()
    )

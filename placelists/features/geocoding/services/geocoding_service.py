"""ジオコーディングサービス"""

from typing import Any, Optional

from ...location.domain.enums import LocationSource
from ...location.domain.models import Coordinate
from ...location.utils.geometry import validate_coordinate
from ....shared.exceptions.errors import (
    AddressNotFound,
    EmptyAddress,
    GeocodingServiceError,
)
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import now_utc
from ....shared.utils.text import normalize_text
from ..domain.models import GeoLocation
from ..providers.base import Geocoder

logger = get_logger(__name__)


class GeocodingService:
    """
    ジオコーディングサービス

    住所 → 座標の変換（必須ステップ。失敗は例外）と、
    座標 → 住所の変換（表示用の付加情報。失敗はNone）を提供する。
    """

    def __init__(self, geocoder: Geocoder) -> None:
        """
        Args:
            geocoder: ジオコーダー（Nominatim / Google Maps）
        """
        self.geocoder = geocoder

        logger.info(f"GeocodingService initialized: {geocoder.__class__.__name__}")

    def geocode_address(
        self,
        address_text: str,
        source: LocationSource = LocationSource.ADDRESS_LOOKUP,
    ) -> Coordinate:
        """
        住所をジオコーディングし、座標を返す

        Args:
            address_text: 住所文字列
            source: 座標の取得元タグ

        Returns:
            Coordinate: 住所（サービスが正規化したもの）付きの座標

        Raises:
            EmptyAddress: 住所が空（リクエストは送らない）
            AddressNotFound: 該当なし
            GeocodingServiceError: 通信エラー、またはサービスが不正な座標を返した
        """
        address = normalize_text(address_text)
        if not address:
            raise EmptyAddress("Address must not be empty")

        geo_location = self.geocoder.geocode(address)

        if geo_location is None:
            raise AddressNotFound(f"No results for address: {address}")

        if not validate_coordinate(geo_location.latitude, geo_location.longitude):
            raise GeocodingServiceError(
                f"Geocoder returned invalid coordinates for {address}: "
                f"({geo_location.latitude}, {geo_location.longitude})"
            )

        logger.debug(
            f"Geocoded {address} -> ({geo_location.latitude}, {geo_location.longitude})"
        )

        return self._to_coordinate(geo_location, source)

    def reverse_geocode(self, coordinate: Any) -> Optional[str]:
        """
        座標から住所文字列を取得（ベストエフォート）

        通信エラーや該当なしの場合も例外は送出せず、原因をログに出してNoneを返す

        Args:
            coordinate: lat / lng を持つ座標

        Returns:
            Optional[str]: 住所文字列
        """
        lat = getattr(coordinate, "lat", None)
        lng = getattr(coordinate, "lng", None)

        if not validate_coordinate(lat, lng):
            logger.warning(f"Skipping reverse geocoding for invalid coordinate: ({lat}, {lng})")
            return None

        try:
            geo_location = self.geocoder.reverse_geocode(lat, lng)
        except GeocodingServiceError as e:
            logger.warning(f"Reverse geocoding failed for ({lat}, {lng}): {e}")
            return None
        except Exception as e:
            logger.warning(
                f"Unexpected error during reverse geocoding for ({lat}, {lng}): {e}",
                exc_info=True,
            )
            return None

        if geo_location is None or not geo_location.formatted_address:
            logger.warning(f"No address found for ({lat}, {lng})")
            return None

        return geo_location.formatted_address

    def close(self) -> None:
        """ジオコーダーのリソースを解放"""
        self.geocoder.close()

    def _to_coordinate(self, geo_location: GeoLocation, source: LocationSource) -> Coordinate:
        return Coordinate(
            lat=float(geo_location.latitude),
            lng=float(geo_location.longitude),
            source=source,
            captured_at=now_utc(),
            address=geo_location.formatted_address,
            name=geo_location.name,
            # 種別情報がない結果は "place" にせず未設定のまま
            place_type=geo_location.place_type if geo_location.types else None,
        )

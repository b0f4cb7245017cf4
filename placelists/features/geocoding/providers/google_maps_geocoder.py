"""Google Maps Geocoding API実装"""
from typing import Any, Optional

import googlemaps

from ....shared.exceptions.errors import ConfigurationError, GeocodingServiceError
from ....shared.logging.config import get_logger
from ..domain.models import GeoLocation

logger = get_logger(__name__)


class GoogleMapsGeocoder:
    """Google Maps Geocoding API実装"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: int = 10,
        language: Optional[str] = None,
        client: Optional[googlemaps.Client] = None,
    ) -> None:
        """
        Args:
            api_key: Google Maps API キー
            timeout: タイムアウト（秒）
            language: 結果の言語（例: "en"）
            client: googlemapsクライアント（テスト用に差し替え可能）
        """
        self.language = language

        if client is not None:
            self.client = client
            return

        if not api_key:
            raise ConfigurationError("Google Maps API key is required for GoogleMapsGeocoder")

        try:
            # リトライは呼び出し元の判断に任せる
            self.client = googlemaps.Client(
                key=api_key,
                timeout=timeout,
                retry_over_query_limit=False,
            )
            logger.info("GoogleMapsGeocoder initialized")
        except ValueError as e:
            raise ConfigurationError(f"Failed to initialize Google Maps client: {e}") from e

    def geocode(self, address: str) -> Optional[GeoLocation]:
        """
        住所をジオコーディング

        Args:
            address: 住所文字列

        Returns:
            Optional[GeoLocation]: 地理的位置情報（見つからない場合はNone）

        Raises:
            GeocodingServiceError: APIリクエストに失敗した場合
        """
        logger.debug(f"Geocoding address: {address}")

        results = self._call(lambda: self.client.geocode(address, language=self.language))

        if not results:
            logger.warning(f"No geocoding results for address: {address}")
            return None

        # 最初の結果を使用
        result = results[0]
        location = result.get("geometry", {}).get("location", {})

        latitude = location.get("lat")
        longitude = location.get("lng")

        if latitude is None or longitude is None:
            raise GeocodingServiceError(f"Invalid geocoding result (missing lat/lng): {address}")

        geo_location = self._to_geo_location(result, latitude, longitude)

        logger.debug(f"Geocoded: {address} -> ({latitude}, {longitude})")
        return geo_location

    def reverse_geocode(self, latitude: float, longitude: float) -> Optional[GeoLocation]:
        """
        座標から住所を取得（逆ジオコーディング）

        Raises:
            GeocodingServiceError: APIリクエストに失敗した場合
        """
        logger.debug(f"Reverse geocoding: ({latitude}, {longitude})")

        results = self._call(
            lambda: self.client.reverse_geocode((latitude, longitude), language=self.language)
        )

        if not results:
            logger.warning(f"No reverse geocoding results for: ({latitude}, {longitude})")
            return None

        geo_location = self._to_geo_location(results[0], latitude, longitude)

        logger.debug(
            f"Reverse geocoded: ({latitude}, {longitude}) -> {geo_location.formatted_address}"
        )
        return geo_location

    def close(self) -> None:
        """HTTPセッションをクローズ"""
        session = getattr(self.client, "session", None)
        if session is not None:
            session.close()

    def _call(self, request: Any) -> Any:
        try:
            return request()
        except googlemaps.exceptions.ApiError as e:
            raise GeocodingServiceError(f"Google Maps API error: {e}") from e
        except (googlemaps.exceptions.TransportError, googlemaps.exceptions.Timeout) as e:
            raise GeocodingServiceError(f"Google Maps transport error: {e}") from e

    def _to_geo_location(
        self, result: dict[str, Any], latitude: float, longitude: float
    ) -> GeoLocation:
        return GeoLocation(
            latitude=latitude,
            longitude=longitude,
            formatted_address=result.get("formatted_address"),
            place_id=result.get("place_id"),
            name=result.get("name"),
            types=list(result.get("types", [])),
        )

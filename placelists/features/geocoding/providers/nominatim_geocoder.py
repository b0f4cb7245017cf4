"""OpenStreetMap Nominatim 実装"""
from typing import Any, Optional

from ....shared.exceptions.errors import GeocodingServiceError, HTTPError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ....shared.utils.text import normalize_text, parse_float
from ..domain.models import GeoLocation

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org"


class NominatimGeocoder:
    """OpenStreetMap Nominatim API実装"""

    def __init__(
        self,
        user_agent: str,
        base_url: str = DEFAULT_BASE_URL,
        accept_language: str = "en-US,en",
        timeout: int = 10,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            user_agent: User-Agentヘッダー（Nominatimの利用規約でアプリの識別が必須）
            base_url: APIのベースURL
            accept_language: 結果の言語
            timeout: タイムアウト（秒）
            http_client: HTTPクライアント（Noneの場合は新規作成）
        """
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client or HTTPClient(
            timeout=timeout,
            max_retries=0,
            user_agent=user_agent,
            default_headers={"Accept-Language": accept_language},
        )
        logger.info(f"NominatimGeocoder initialized: {self.base_url}")

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

        data = self._request(
            "/search",
            {"format": "json", "q": address, "limit": 1, "addressdetails": 1},
        )

        if not isinstance(data, list):
            raise GeocodingServiceError(f"Unexpected Nominatim search response: {type(data)}")

        if not data:
            logger.warning(f"No geocoding results for address: {address}")
            return None

        # 最初の結果を使用
        geo_location = self._to_geo_location(data[0])
        if geo_location is None:
            raise GeocodingServiceError(f"Invalid geocoding result (missing lat/lon): {address}")

        logger.debug(f"Geocoded: {address} -> ({geo_location.latitude}, {geo_location.longitude})")
        return geo_location

    def reverse_geocode(self, latitude: float, longitude: float) -> Optional[GeoLocation]:
        """
        座標から住所を取得（逆ジオコーディング）

        Raises:
            GeocodingServiceError: APIリクエストに失敗した場合
        """
        logger.debug(f"Reverse geocoding: ({latitude}, {longitude})")

        data = self._request(
            "/reverse",
            {
                "format": "json",
                "lat": latitude,
                "lon": longitude,
                "zoom": 18,
                "addressdetails": 1,
            },
        )

        # 該当なしの場合も200で {"error": "Unable to geocode"} が返る
        if not isinstance(data, dict) or data.get("error") or not data.get("display_name"):
            logger.warning(f"No reverse geocoding results for: ({latitude}, {longitude})")
            return None

        geo_location = GeoLocation(
            latitude=latitude,
            longitude=longitude,
            formatted_address=normalize_text(data.get("display_name")),
            place_id=_to_str(data.get("place_id")),
            name=data.get("name") or None,
            types=_types(data),
        )

        logger.debug(
            f"Reverse geocoded: ({latitude}, {longitude}) -> {geo_location.formatted_address}"
        )
        return geo_location

    def close(self) -> None:
        """HTTPセッションをクローズ"""
        self.http_client.close()

    def _request(self, path: str, params: dict[str, Any]) -> Any:
        try:
            return self.http_client.get_json(f"{self.base_url}{path}", params=params)
        except HTTPError as e:
            raise GeocodingServiceError(f"Nominatim request failed: {e}") from e

    def _to_geo_location(self, result: dict[str, Any]) -> Optional[GeoLocation]:
        latitude = parse_float(result.get("lat"))
        longitude = parse_float(result.get("lon"))

        if latitude is None or longitude is None:
            return None

        return GeoLocation(
            latitude=latitude,
            longitude=longitude,
            formatted_address=normalize_text(result.get("display_name")),
            place_id=_to_str(result.get("place_id")),
            name=result.get("name") or None,
            types=_types(result),
        )

    def __enter__(self) -> "NominatimGeocoder":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def _to_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _types(result: dict[str, Any]) -> list[str]:
    # Nominatimは class/type（例: amenity/cafe）で種別を返す
    return [t for t in (result.get("type"), result.get("class")) if t]

"""座標解決サービス"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence

from ...geocoding.providers.factory import create_geocoder
from ...geocoding.services.geocoding_service import GeocodingService
from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import InvalidCoordinates
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import now_utc
from ....shared.utils.text import parse_float
from ..domain.enums import LocationSource
from ..domain.models import Coordinate
from ..providers.device_location import DeviceLocationService, get_current_device_location
from ..providers.exif_location_reader import extract_location_from_photo
from ..providers.url_location_extractor import UrlLocationExtractor
from ..utils.geometry import format_coordinate, haversine_distance_km, validate_coordinate
from ..utils.map_utils import MapView, calculate_optimal_map_view
from ..utils.records import coordinate_from_record, transform_place_records

logger = get_logger(__name__)


class CoordinateResolver:
    """
    座標解決サービス

    写真・端末の位置情報・住所・地図クリック・手入力・URL といった
    取得元ごとの入力を、検証済みの Coordinate に正規化する。
    各呼び出しは独立しており、呼び出し間で状態を共有しない。
    """

    def __init__(
        self,
        geocoding_service: GeocodingService,
        device_location_service: Optional[DeviceLocationService] = None,
        url_extractor: Optional[UrlLocationExtractor] = None,
        device_timeout_ms: int = 10000,
        device_max_age_ms: int = 60000,
        precision: int = 6,
    ) -> None:
        """
        Args:
            geocoding_service: ジオコーディングサービス
            device_location_service: 端末の位置情報サービス（ない場合は現在地取得が失敗する）
            url_extractor: URL抽出（Noneの場合はgeocoding_serviceから生成）
            device_timeout_ms: 現在地取得の既定タイムアウト（ミリ秒）
            device_max_age_ms: 現在地取得の既定キャッシュ許容時間（ミリ秒）
            precision: 座標表示の既定桁数
        """
        self.geocoding_service = geocoding_service
        self.device_location_service = device_location_service
        self.url_extractor = url_extractor or UrlLocationExtractor(geocoding_service)
        self.device_timeout_ms = device_timeout_ms
        self.device_max_age_ms = device_max_age_ms
        self.precision = precision

        logger.debug(
            f"CoordinateResolver initialized: device_service={device_location_service is not None}"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        device_location_service: Optional[DeviceLocationService] = None,
    ) -> "CoordinateResolver":
        """設定から生成"""
        geocoding_service = GeocodingService(create_geocoder(settings))
        return cls(
            geocoding_service=geocoding_service,
            device_location_service=device_location_service,
            device_timeout_ms=settings.device_location_timeout_ms,
            device_max_age_ms=settings.device_location_max_age_ms,
            precision=settings.coordinate_precision,
        )

    # ------------------------------------------------------------------
    # 取得元ごとの解決
    # ------------------------------------------------------------------

    def extract_location_from_photo(self, image_bytes: bytes) -> Coordinate:
        """
        写真のEXIFから撮影位置を取得

        Raises:
            NoGpsData: 位置情報がない（別の取得元を促す）
            GpsConversionFailed: タグの変換に失敗
            InvalidGpsCoordinates: 範囲外、または (0, 0)
        """
        return extract_location_from_photo(image_bytes)

    async def get_current_device_location(
        self,
        timeout_ms: Optional[int] = None,
        max_age_ms: Optional[int] = None,
    ) -> Coordinate:
        """
        端末の現在地を取得

        Raises:
            LocationPermissionDenied, LocationUnavailable, LocationTimedOut
        """
        return await get_current_device_location(
            self.device_location_service,
            timeout_ms=self.device_timeout_ms if timeout_ms is None else timeout_ms,
            max_age_ms=self.device_max_age_ms if max_age_ms is None else max_age_ms,
        )

    def geocode_address(self, address_text: str) -> Coordinate:
        """
        住所から座標を取得

        Raises:
            EmptyAddress, AddressNotFound, GeocodingServiceError
        """
        return self.geocoding_service.geocode_address(address_text)

    def search_text(self, query: str) -> Coordinate:
        """
        検索ボックスの入力（場所名・住所）から座標を取得

        Raises:
            EmptyAddress, AddressNotFound, GeocodingServiceError
        """
        return self.geocoding_service.geocode_address(query, source=LocationSource.TEXT_SEARCH)

    def reverse_geocode(self, coordinate: Coordinate) -> Optional[str]:
        """座標から住所を取得（失敗時はNone）"""
        return self.geocoding_service.reverse_geocode(coordinate)

    def extract_location_from_url(self, url: str) -> Coordinate:
        """
        地図・ウェブページのURLから座標を取得

        Raises:
            NoLocationInUrl, UrlFetchError, GeocodingServiceError
        """
        return self.url_extractor.extract(url)

    def from_map_click(self, lat: float, lng: float) -> Coordinate:
        """
        地図上のクリック位置から座標を生成

        Raises:
            InvalidCoordinates: 範囲外
        """
        return self._build(lat, lng, LocationSource.MAP_CLICK)

    def from_manual_entry(self, lat: Any, lng: Any) -> Coordinate:
        """
        手入力の緯度・経度（数値または数値文字列）から座標を生成

        Raises:
            InvalidCoordinates: 数値でない、または範囲外
        """
        return self._build(parse_float(lat), parse_float(lng), LocationSource.MANUAL_ENTRY, raw=(lat, lng))

    # ------------------------------------------------------------------
    # 検証・計算
    # ------------------------------------------------------------------

    @staticmethod
    def validate_coordinate(lat: Any, lng: Any) -> bool:
        """座標が有効かどうか（(0, 0) は拒否しない）"""
        return validate_coordinate(lat, lng)

    @staticmethod
    def haversine_distance_km(a: Coordinate, b: Coordinate) -> float:
        """2点間の距離（km）"""
        return haversine_distance_km(a, b)

    def format_coordinate(self, coordinate: Coordinate, precision: Optional[int] = None) -> str:
        """表示用の文字列（"lat, lng"）"""
        return format_coordinate(coordinate, self.precision if precision is None else precision)

    # ------------------------------------------------------------------
    # 保存済みの場所・地図表示
    # ------------------------------------------------------------------

    @staticmethod
    def coordinate_from_record(record: Mapping[str, Any]) -> Optional[Coordinate]:
        """保存済みの場所レコードから座標を取得（ない・不正な場合はNone）"""
        return coordinate_from_record(record)

    @staticmethod
    def transform_place_records(records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """場所レコードを表示用に変換（座標が不正なレコードはスキップ）"""
        return transform_place_records(records)

    @staticmethod
    def calculate_optimal_map_view(
        coordinates: Sequence[Coordinate],
        container_width: float,
        container_height: float,
    ) -> MapView:
        """全座標が収まる地図の中心とズーム"""
        return calculate_optimal_map_view(coordinates, container_width, container_height)

    def close(self) -> None:
        """HTTPセッションなどのリソースを解放"""
        self.url_extractor.close()
        self.geocoding_service.close()

    def __enter__(self) -> "CoordinateResolver":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _build(
        self,
        lat: Optional[float],
        lng: Optional[float],
        source: LocationSource,
        raw: Optional[tuple[Any, Any]] = None,
    ) -> Coordinate:
        if not validate_coordinate(lat, lng):
            shown = raw if raw is not None else (lat, lng)
            raise InvalidCoordinates(
                f"Invalid coordinates from {source.value}: {shown}",
                lat=lat,
                lng=lng,
            )

        return Coordinate(
            lat=float(lat),
            lng=float(lng),
            source=source,
            captured_at=now_utc(),
        )

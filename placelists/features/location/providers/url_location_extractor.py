"""地図・ウェブページのURLから位置情報を抽出"""

import re
from typing import Any, Optional

from bs4 import BeautifulSoup

from ...geocoding.services.geocoding_service import GeocodingService
from ....shared.exceptions.errors import (
    AddressNotFound,
    HTTPError,
    NoLocationInUrl,
    UrlFetchError,
)
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import now_utc
from ....shared.utils.text import normalize_text, parse_float
from ..converters.map_url_parser import (
    extract_coordinates_from_url,
    extract_query_from_url,
    is_google_maps_url,
    is_short_maps_url,
)
from ..domain.enums import LocationSource
from ..domain.models import Coordinate
from ..utils.geometry import validate_coordinate

logger = get_logger(__name__)

# 緯度・経度を個別に持つmetaタグ（property / name 属性）
_LAT_LNG_META_PAIRS = [
    ("place:location:latitude", "place:location:longitude"),
    ("og:latitude", "og:longitude"),
    ("latitude", "longitude"),
]


class UrlLocationExtractor:
    """
    URLから座標を抽出

    1. 短縮URLを展開
    2. URL中の座標 → 逆ジオコーディングで住所を付与
    3. URL中の検索語 → ジオコーディング
    4. ページのmetaタグ（geo.position / ICBM / og:latitude など）
    5. ページタイトルで場所検索
    """

    def __init__(self, geocoding_service: GeocodingService, http_client: Optional[HTTPClient] = None) -> None:
        """
        Args:
            geocoding_service: ジオコーディングサービス
            http_client: ページ取得用HTTPクライアント（Noneの場合は新規作成）
        """
        self.geocoding_service = geocoding_service
        self.http_client = http_client or HTTPClient(max_retries=0)

    def extract(self, url: str) -> Coordinate:
        """
        URLから座標を抽出

        Args:
            url: Google MapsのURL、または任意のウェブページURL

        Returns:
            Coordinate: source=url-extract の座標

        Raises:
            NoLocationInUrl: 位置情報が見つからない（URLが空の場合も含む）
            UrlFetchError: ページの取得に失敗
            GeocodingServiceError: 検索語のジオコーディングで通信エラー
        """
        url = (url or "").strip()
        if not url:
            raise NoLocationInUrl("URL is required")

        if is_short_maps_url(url):
            url = self._expand_short_url(url)

        coordinate = self._from_url_text(url)
        if coordinate is not None:
            return coordinate

        if is_google_maps_url(url):
            raise NoLocationInUrl(f"No coordinates or place query found in maps URL: {url}")

        return self._from_page(url)

    def close(self) -> None:
        """HTTPセッションをクローズ"""
        self.http_client.close()

    def _expand_short_url(self, url: str) -> str:
        try:
            expanded = self.http_client.resolve_url(url)
            logger.debug(f"Expanded short URL: {url} -> {expanded}")
            return expanded
        except HTTPError as e:
            # 展開に失敗しても元のURLで続行
            logger.warning(f"Failed to expand short URL {url}: {e}")
            return url

    def _from_url_text(self, url: str) -> Optional[Coordinate]:
        coordinates = extract_coordinates_from_url(url)
        if coordinates is not None:
            lat, lng = coordinates
            coordinate = self._coordinate(lat, lng)
            return coordinate.with_address(self.geocoding_service.reverse_geocode(coordinate))

        query = extract_query_from_url(url)
        if query:
            try:
                return self._geocode(query)
            except AddressNotFound as e:
                raise NoLocationInUrl(f"Could not locate query {query!r} from {url}: {e}") from e

        return None

    def _from_page(self, url: str) -> Coordinate:
        try:
            response = self.http_client.get(url)
        except HTTPError as e:
            raise UrlFetchError(f"Failed to fetch {url}: {e}") from e

        soup = BeautifulSoup(response.text, "html.parser")

        coordinates = extract_coordinates_from_html(soup)
        if coordinates is not None:
            lat, lng = coordinates
            coordinate = self._coordinate(lat, lng)
            return coordinate.with_address(self.geocoding_service.reverse_geocode(coordinate))

        title = extract_title(soup)
        if title:
            logger.debug(f"Searching for place using page title: {title}")
            try:
                return self._geocode(title)
            except AddressNotFound as e:
                raise NoLocationInUrl(
                    f"Could not locate page title {title!r} from {url}: {e}"
                ) from e

        raise NoLocationInUrl(f"The page doesn't contain recognizable location data: {url}")

    def _geocode(self, query: str) -> Coordinate:
        coordinate = self.geocoding_service.geocode_address(query, source=LocationSource.URL_EXTRACT)
        logger.debug(f"Located {query!r} at ({coordinate.lat}, {coordinate.lng})")
        return coordinate

    def _coordinate(self, lat: float, lng: float) -> Coordinate:
        return Coordinate(
            lat=lat,
            lng=lng,
            source=LocationSource.URL_EXTRACT,
            captured_at=now_utc(),
        )

    def __enter__(self) -> "UrlLocationExtractor":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def extract_coordinates_from_html(soup: BeautifulSoup) -> Optional[tuple[float, float]]:
    """
    ページのmetaタグから座標を抽出

    対応するmetaタグ:
    - place:location:latitude / place:location:longitude（Open Graph）
    - og:latitude / og:longitude
    - geo.position（"lat;lng"）
    - ICBM（"lat, lng"）

    Returns:
        Optional[tuple[float, float]]: (緯度, 経度)
    """
    for lat_key, lng_key in _LAT_LNG_META_PAIRS:
        lat = parse_float(_meta_content(soup, lat_key))
        lng = parse_float(_meta_content(soup, lng_key))
        if validate_coordinate(lat, lng):
            logger.debug(f"Found coordinates in meta {lat_key}/{lng_key}: ({lat}, {lng})")
            return (lat, lng)

    for key, separator in (("geo.position", ";"), ("ICBM", ",")):
        content = _meta_content(soup, key)
        if not content:
            continue
        parts = [parse_float(part) for part in content.split(separator)]
        if len(parts) == 2 and validate_coordinate(parts[0], parts[1]):
            logger.debug(f"Found coordinates in meta {key}: ({parts[0]}, {parts[1]})")
            return (parts[0], parts[1])

    return None


def extract_title(soup: BeautifulSoup) -> Optional[str]:
    """ページタイトルの先頭部分（" - " / " | " より前）を返す"""
    if soup.title is None:
        return None

    title = normalize_text(soup.title.get_text())
    if not title:
        return None

    return normalize_text(re.split(r"\s[-|–]\s", title)[0])


def _meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
    if tag is None:
        return None
    content = tag.get("content")
    return content.strip() if isinstance(content, str) else None

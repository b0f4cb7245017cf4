"""ジオコーダーのインターフェース"""
from typing import Optional, Protocol

from ..domain.models import GeoLocation


class Geocoder(Protocol):
    """
    ジオコーダー

    見つからない場合は None を返し、通信・サービスのエラーは
    GeocodingServiceError を送出する。リトライは行わない。
    """

    def geocode(self, address: str) -> Optional[GeoLocation]:
        ...

    def reverse_geocode(self, latitude: float, longitude: float) -> Optional[GeoLocation]:
        ...

    def close(self) -> None:
        ...

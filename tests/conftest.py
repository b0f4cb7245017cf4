"""共通フィクスチャ"""

import asyncio
import io
from typing import Any, Callable, Optional

import pytest
from PIL import Image
from PIL.TiffImagePlugin import IFDRational

from placelists.features.geocoding.domain.models import GeoLocation
from placelists.features.location.domain.models import DevicePosition, PositionOptions

GPS_IFD_TAG = 0x8825


def dms(degrees: int, minutes: int, seconds_x100: int) -> tuple[IFDRational, IFDRational, IFDRational]:
    """EXIFのRATIONAL形式の度・分・秒"""
    return (IFDRational(degrees, 1), IFDRational(minutes, 1), IFDRational(seconds_x100, 100))


@pytest.fixture
def make_jpeg() -> Callable[[Optional[dict[int, Any]]], bytes]:
    """GPS IFD（タグID → 値）を指定してJPEGのバイト列を作るファクトリ"""

    def _make(gps: Optional[dict[int, Any]] = None) -> bytes:
        image = Image.new("RGB", (8, 8), color=(200, 120, 40))
        buffer = io.BytesIO()
        if gps is None:
            image.save(buffer, "JPEG")
        else:
            exif = Image.Exif()
            exif[GPS_IFD_TAG] = gps
            image.save(buffer, "JPEG", exif=exif)
        return buffer.getvalue()

    return _make


@pytest.fixture
def jpeg_without_gps(make_jpeg) -> bytes:
    """位置情報のないJPEG"""
    return make_jpeg(None)


@pytest.fixture
def jpeg_with_gps(make_jpeg) -> bytes:
    """インスブルック付近（47.26187, 11.39454）で撮影したJPEG"""
    return make_jpeg(
        {
            1: "N",
            2: dms(47, 15, 4272),
            3: "E",
            4: dms(11, 23, 4034),
        }
    )


class FakeGeocoder:
    """呼び出しを記録するジオコーダー"""

    def __init__(
        self,
        result: Optional[GeoLocation] = None,
        reverse_result: Optional[GeoLocation] = None,
        error: Optional[Exception] = None,
        reverse_error: Optional[Exception] = None,
    ) -> None:
        self.result = result
        self.reverse_result = reverse_result
        self.error = error
        self.reverse_error = reverse_error
        self.geocode_calls: list[str] = []
        self.reverse_calls: list[tuple[float, float]] = []
        self.closed = False

    def geocode(self, address: str) -> Optional[GeoLocation]:
        self.geocode_calls.append(address)
        if self.error is not None:
            raise self.error
        return self.result

    def reverse_geocode(self, latitude: float, longitude: float) -> Optional[GeoLocation]:
        self.reverse_calls.append((latitude, longitude))
        if self.reverse_error is not None:
            raise self.reverse_error
        return self.reverse_result

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    """シアトルの住所を返すジオコーダー"""
    return FakeGeocoder(
        result=GeoLocation(
            latitude=47.6062,
            longitude=-122.3321,
            formatted_address="Seattle, King County, Washington, United States",
        ),
        reverse_result=GeoLocation(
            latitude=47.6062,
            longitude=-122.3321,
            formatted_address="Seattle, King County, Washington, United States",
        ),
    )


class FakeDeviceService:
    """指定した結果を返す（または例外を送出する）位置情報サービス"""

    def __init__(
        self,
        position: Optional[DevicePosition] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.position = position
        self.error = error
        self.delay = delay
        self.options: list[PositionOptions] = []

    async def get_current_position(self, options: PositionOptions) -> DevicePosition:
        self.options.append(options)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.position


@pytest.fixture
def fake_device_service() -> FakeDeviceService:
    """ニューヨークの測位結果を返す位置情報サービス"""
    return FakeDeviceService(position=DevicePosition(latitude=40.7128, longitude=-74.006, accuracy=12.5))


class FakeResponse:
    """requests.Response の代わり（text / json / url のみ）"""

    def __init__(self, text: str = "", json_data: Any = None, url: str = "", status_code: int = 200) -> None:
        self.text = text
        self._json_data = json_data
        self.url = url
        self.status_code = status_code

    def json(self) -> Any:
        return self._json_data


@pytest.fixture
def geocoder_factory() -> type[FakeGeocoder]:
    """任意の結果を返すジオコーダーを作るファクトリ"""
    return FakeGeocoder


@pytest.fixture
def device_service_factory() -> type[FakeDeviceService]:
    """任意の結果を返す位置情報サービスを作るファクトリ"""
    return FakeDeviceService


@pytest.fixture
def make_response() -> type[FakeResponse]:
    """HTTPレスポンスを作るファクトリ"""
    return FakeResponse

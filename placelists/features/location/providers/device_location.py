"""端末の位置情報サービスから現在地を取得"""

import asyncio
from datetime import datetime
from enum import IntEnum
from typing import Optional, Protocol

from ....shared.exceptions.errors import (
    DeviceLocationError,
    LocationPermissionDenied,
    LocationTimedOut,
    LocationUnavailable,
)
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import from_epoch_ms, now_utc
from ..domain.enums import LocationSource
from ..domain.models import Coordinate, DevicePosition, PositionOptions
from ..utils.geometry import is_finite_number, validate_coordinate

logger = get_logger(__name__)


class PositionErrorCode(IntEnum):
    """位置情報サービスのエラーコード（W3C Geolocation APIと同じ値）"""

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


class PositionError(Exception):
    """位置情報サービスが返すエラー"""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"Position error (code={code})")
        self.code = code


class DeviceLocationService(Protocol):
    """
    端末の位置情報サービス

    ブラウザのGeolocation APIやモバイルSDKのブリッジなどを実装として差し込む。
    失敗時は PositionError を送出する。
    """

    async def get_current_position(self, options: PositionOptions) -> DevicePosition:
        ...


_ERROR_CLASSES: dict[int, type[DeviceLocationError]] = {
    PositionErrorCode.PERMISSION_DENIED: LocationPermissionDenied,
    PositionErrorCode.POSITION_UNAVAILABLE: LocationUnavailable,
    PositionErrorCode.TIMEOUT: LocationTimedOut,
}


async def get_current_device_location(
    service: Optional[DeviceLocationService],
    timeout_ms: int = 10000,
    max_age_ms: int = 60000,
) -> Coordinate:
    """
    現在地を1回だけ取得

    高精度を要求し、timeout_ms を超えた場合はサービスの応答を待たずに失敗する。

    Args:
        service: 位置情報サービス（Noneの場合は未対応として失敗）
        timeout_ms: タイムアウト（ミリ秒）
        max_age_ms: キャッシュ済み測位結果の最大経過時間（ミリ秒）

    Returns:
        Coordinate: source=current-device の座標

    Raises:
        LocationPermissionDenied: 利用が拒否された
        LocationUnavailable: 測位できない、またはサービスがない
        LocationTimedOut: タイムアウト
    """
    if service is None:
        raise LocationUnavailable("Geolocation is not supported on this device")

    options = PositionOptions(
        enable_high_accuracy=True,
        timeout_ms=timeout_ms,
        maximum_age_ms=max_age_ms,
    )

    logger.debug(f"Requesting device position: timeout={timeout_ms}ms, max_age={max_age_ms}ms")

    try:
        position = await asyncio.wait_for(
            service.get_current_position(options),
            timeout=max(timeout_ms, 0) / 1000.0,
        )
    except asyncio.TimeoutError as e:
        raise LocationTimedOut(f"Location request timed out after {timeout_ms}ms") from e
    except PositionError as e:
        error_class = _ERROR_CLASSES.get(e.code, LocationUnavailable)
        logger.warning(f"Device location failed: {error_class.user_message} ({e})")
        raise error_class(str(e)) from e
    except Exception as e:
        # PositionError 以外の失敗（ブリッジの異常など）は測位不可として扱う
        logger.warning(f"Device location service failed: {type(e).__name__}: {e}")
        raise LocationUnavailable(f"Device location service failed: {e}") from e

    return _to_coordinate(position)


def _to_coordinate(position: Optional[DevicePosition]) -> Coordinate:
    lat = getattr(position, "latitude", None)
    lng = getattr(position, "longitude", None)
    if not validate_coordinate(lat, lng):
        raise LocationUnavailable(f"Device reported invalid position: ({lat}, {lng})")

    accuracy = getattr(position, "accuracy", None)
    if accuracy is not None:
        accuracy = float(accuracy) if is_finite_number(accuracy) and accuracy >= 0 else None

    return Coordinate(
        lat=float(lat),
        lng=float(lng),
        accuracy_meters=accuracy,
        source=LocationSource.CURRENT_DEVICE,
        captured_at=_reported_at(position),
    )


def _reported_at(position: DevicePosition) -> datetime:
    # ブラウザの Position.timestamp はエポックミリ秒
    timestamp = getattr(position, "timestamp", None)
    if is_finite_number(timestamp):
        return from_epoch_ms(timestamp)
    if isinstance(timestamp, datetime):
        return timestamp
    return now_utc()

"""カスタム例外定義"""
from typing import Any, Optional


class PlaceListsError(Exception):
    """基底例外"""

    # UI表示用のメッセージ
    user_message: str = "Something went wrong"


class ConfigurationError(PlaceListsError):
    """設定エラー"""

    pass


class HTTPError(PlaceListsError):
    """HTTP関連のエラー"""

    pass


# ---------------------------------------------------------------------------
# 位置情報
# ---------------------------------------------------------------------------


class LocationError(PlaceListsError):
    """位置情報関連エラーの基底クラス"""

    user_message = "Could not determine a location"


class GpsFormatError(LocationError):
    """GPSタグの形式エラー（変換元の値を保持）"""

    user_message = "Unrecognized GPS data"

    def __init__(self, message: str, raw_value: Any = None) -> None:
        super().__init__(message)
        self.raw_value = raw_value


class UnsupportedGpsFormat(GpsFormatError):
    """GPSタグの形式が未対応"""

    pass


class UnparsableGpsString(GpsFormatError):
    """GPS文字列が解析できない"""

    pass


class NoGpsData(LocationError):
    """画像に位置情報が含まれていない"""

    user_message = "No GPS data found in image"


class GpsConversionFailed(LocationError):
    """GPSタグの変換に失敗"""

    user_message = "Failed to read image location data"


class InvalidCoordinates(LocationError):
    """座標が範囲外または数値でない"""

    user_message = "Invalid coordinates"

    def __init__(
        self, message: str, lat: Optional[float] = None, lng: Optional[float] = None
    ) -> None:
        super().__init__(message)
        self.lat = lat
        self.lng = lng


class InvalidGpsCoordinates(InvalidCoordinates):
    """画像のGPS座標が不正（(0, 0)を含む）"""

    user_message = "Invalid GPS coordinates in image"


class DeviceLocationError(LocationError):
    """端末の位置情報取得エラー"""

    user_message = "Failed to get current location"


class LocationPermissionDenied(DeviceLocationError):
    """位置情報の利用が拒否された"""

    user_message = "Location access denied by user"


class LocationUnavailable(DeviceLocationError):
    """位置情報が取得できない"""

    user_message = "Location information unavailable"


class LocationTimedOut(DeviceLocationError):
    """位置情報の取得がタイムアウト"""

    user_message = "Location request timed out"


class NoLocationInUrl(LocationError):
    """URLから位置情報を抽出できない"""

    user_message = "Could not extract location coordinates from URL"


class UrlFetchError(LocationError):
    """URLの取得に失敗"""

    user_message = "Failed to extract place information from URL"


# ---------------------------------------------------------------------------
# ジオコーディング
# ---------------------------------------------------------------------------


class GeocodingError(PlaceListsError):
    """ジオコーディングエラー"""

    user_message = "Address lookup failed"


class EmptyAddress(GeocodingError):
    """住所が空"""

    user_message = "Please enter an address"


class AddressNotFound(GeocodingError):
    """住所に一致する結果がない"""

    user_message = "Address not found. Please try a different search term."


class GeocodingServiceError(GeocodingError):
    """ジオコーディングサービスの通信・応答エラー"""

    user_message = "Failed to search for address. Please try again."

"""位置情報機能のドメインモデル"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional, Union

from .enums import LocationSource


@dataclass(frozen=True)
class Coordinate:
    """
    正規化済みの座標（10進数の度）

    解決処理ごとに生成される一時的な値で、永続化はしない。
    保存は外部の永続化層が to_dict() の形式で受け取る。
    """

    lat: float  # 緯度 [-90, 90]
    lng: float  # 経度 [-180, 180]
    accuracy_meters: Optional[float] = None  # 精度（メートル）
    source: Optional[LocationSource] = None  # 取得元
    captured_at: Optional[datetime] = None  # 取得日時
    address: Optional[str] = None  # 住所（ジオコーディング結果）
    name: Optional[str] = None  # 場所名（検索結果の施設名）
    place_type: Optional[str] = None  # 表示用の場所種別（"cafe", "park" など）

    def __repr__(self) -> str:
        source = self.source.value if self.source else None
        return f"Coordinate(lat={self.lat}, lng={self.lng}, source={source})"

    @property
    def is_null_island(self) -> bool:
        """
        (0, 0) かどうか

        GPSが測位できていない場合の既定値として書き込まれることが多く、
        範囲内ではあるが有効な位置として扱うべきではない
        """
        return self.lat == 0 and self.lng == 0

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.lat, self.lng)

    def with_address(self, address: Optional[str]) -> "Coordinate":
        """住所を設定したコピーを返す"""
        return replace(self, address=address)

    def to_dict(self) -> dict[str, Any]:
        """永続化層・APIレスポンス用の辞書に変換"""
        return {
            "lat": self.lat,
            "lng": self.lng,
            "accuracy": self.accuracy_meters,
            "source": self.source.value if self.source else None,
            "timestamp": self.captured_at.isoformat() if self.captured_at else None,
            "address": self.address,
            "name": self.name,
            "type": self.place_type,
        }


@dataclass(frozen=True)
class PositionOptions:
    """端末の位置情報サービスへの要求オプション"""

    enable_high_accuracy: bool = True
    timeout_ms: int = 10000
    maximum_age_ms: int = 60000


@dataclass(frozen=True)
class DevicePosition:
    """端末の位置情報サービスが返す測位結果"""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None  # メートル
    timestamp: Optional[Union[datetime, float]] = None  # datetime またはエポックミリ秒

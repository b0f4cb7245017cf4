"""日時関連ユーティリティ"""

from datetime import datetime, timezone
from typing import Any, Optional

# EXIFの日時フォーマット（例: "2024:05:01 14:30:00"）
EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def now_utc() -> datetime:
    """現在のUTC時間を取得"""
    return datetime.now(timezone.utc)


def from_epoch_ms(epoch_ms: float) -> datetime:
    """
    エポックミリ秒（ブラウザのPosition.timestamp形式）をUTCのdatetimeに変換
    """
    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=timezone.utc)


def parse_exif_datetime(value: Any) -> Optional[datetime]:
    """
    EXIFの日時文字列をdatetimeに変換

    EXIFの DateTimeOriginal はタイムゾーンを持たないため、naiveなdatetimeを返す

    Args:
        value: "YYYY:MM:DD HH:MM:SS" 形式の文字列

    Returns:
        Optional[datetime]: 変換できない場合はNone
    """
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if not isinstance(value, str):
        return None

    try:
        return datetime.strptime(value.strip().rstrip("\x00"), EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def parse_gps_datetime(date_stamp: Any, time_stamp: Any) -> Optional[datetime]:
    """
    EXIFのGPSDateStamp / GPSTimeStamp をUTCのdatetimeに変換

    Args:
        date_stamp: "YYYY:MM:DD"
        time_stamp: (時, 分, 秒) の数値タプル

    Returns:
        Optional[datetime]: 変換できない場合はNone
    """
    if isinstance(date_stamp, bytes):
        date_stamp = date_stamp.decode("ascii", errors="ignore")
    if not isinstance(date_stamp, str) or not time_stamp:
        return None

    try:
        date = datetime.strptime(date_stamp.strip().rstrip("\x00"), "%Y:%m:%d")
        hours, minutes, seconds = (float(part) for part in time_stamp)
        whole_seconds = int(seconds)
        return date.replace(
            hour=int(hours),
            minute=int(minutes),
            second=whole_seconds,
            microsecond=int(round((seconds - whole_seconds) * 1_000_000)) % 1_000_000,
            tzinfo=timezone.utc,
        )
    except (TypeError, ValueError, ZeroDivisionError):
        return None

"""
GPSタグ → 10進数の度 への変換

EXIFリーダーやクライアントから渡されるGPSタグは形式がまちまちなため、
以下の形式をすべて受け付けて1つの数値に正規化する。

1. 数値（すでに度単位）
2. 度・分・秒の数値シーケンス
3. 度・分・秒の (分子, 分母) ペアのシーケンス（EXIFのRATIONAL）
4. 文字列（10進数、"D° M' S\"" 形式、空白区切りの "D M S"）
5. 上記を .value / .description に持つラッパーオブジェクト
"""

import math
import re
from collections.abc import Mapping, Sequence
from numbers import Real
from typing import Any, Optional

from ....shared.exceptions.errors import UnparsableGpsString, UnsupportedGpsFormat
from ....shared.logging.config import get_logger
from ....shared.utils.text import truncate_text
from ..domain.enums import Hemisphere

logger = get_logger(__name__)

_MISSING = object()

_DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

_DMS_PATTERN = re.compile(
    r"""
    ^\s*
    (?P<deg>[+-]?\d+(?:\.\d+)?)\s*(?:°|º|˚|deg(?:rees?)?)?\s*,?\s*
    (?:(?P<min>\d+(?:\.\d+)?)\s*(?:'|′|’|min(?:utes?)?)?\s*,?\s*)?
    (?:(?P<sec>\d+(?:\.\d+)?)\s*(?:"|″|”|''|′′|sec(?:onds?)?)?\s*)?
    $
    """,
    re.VERBOSE | re.IGNORECASE,
)


def convert_gps_tag_to_decimal_degrees(raw_tag: Any, hemisphere_ref: Any = None) -> float:
    """
    GPSタグを10進数の度に変換

    Args:
        raw_tag: GPSタグ（数値、シーケンス、文字列、ラッパーオブジェクト）
        hemisphere_ref: 半球参照（"N"/"S"/"E"/"W"）。"S"/"W"の場合は符号を反転

    Returns:
        float: 10進数の度（範囲チェックは行わない）

    Raises:
        UnsupportedGpsFormat: 対応していない形式
        UnparsableGpsString: 文字列を解析できない
    """
    try:
        magnitude = _to_magnitude(raw_tag)
    except (OverflowError, ZeroDivisionError) as e:
        # float に収まらない巨大な整数や分母0の分数型
        raise UnsupportedGpsFormat(
            f"GPS tag is out of numeric range: {_describe(raw_tag)}",
            raw_value=raw_tag,
        ) from e

    if not math.isfinite(magnitude):
        raise UnsupportedGpsFormat(
            f"GPS tag did not convert to a finite number: {_describe(raw_tag)}",
            raw_value=raw_tag,
        )

    if is_negative_hemisphere(hemisphere_ref):
        magnitude = -magnitude

    return magnitude


def is_negative_hemisphere(hemisphere_ref: Any) -> bool:
    """
    半球参照が南緯・西経を示すかどうか

    "S"/"W"で始まる文字列、bytes、["S"] のようなリスト、.value を持つラッパーを受け付ける
    """
    ref = _unwrap_ref(hemisphere_ref)
    if not ref:
        return False

    try:
        return Hemisphere(ref[0].upper()).is_negative
    except ValueError:
        logger.debug(f"Ignoring unknown hemisphere reference: {ref!r}")
        return False


def parse_gps_string(text: str) -> float:
    """
    GPS文字列を10進数の度に変換

    以下の順で解析する:
    (a) 10進数 "47.26187"
    (b) 度分秒 "47° 15' 42.72\""（記号は省略・表記揺れを許容）
    (c) 空白区切り "47 15 42.72"

    Raises:
        UnparsableGpsString: いずれにも一致しない場合
    """
    stripped = text.strip()

    if _DECIMAL_PATTERN.match(stripped):
        return float(stripped)

    match = _DMS_PATTERN.match(stripped)
    if match:
        return combine_dms(
            float(match.group("deg")),
            float(match.group("min") or 0),
            float(match.group("sec") or 0),
        )

    tokens = [t for t in re.split(r"[\s,]+", stripped) if t]
    if 0 < len(tokens) <= 3 and all(_DECIMAL_PATTERN.match(t) for t in tokens):
        return combine_dms(*(float(t) for t in tokens))

    raise UnparsableGpsString(f"Unparsable GPS string: {text!r}", raw_value=text)


def combine_dms(degrees: float, minutes: float = 0.0, seconds: float = 0.0) -> float:
    """度・分・秒を10進数の度に変換（度の符号を全体に適用）"""
    magnitude = abs(degrees) + minutes / 60.0 + seconds / 3600.0
    return -magnitude if degrees < 0 else magnitude


def _to_magnitude(raw: Any) -> float:
    # 1. 数値
    if _is_number(raw):
        return float(raw)

    # 2. .value を持つラッパー
    value = _get_field(raw, "value")
    if value is not _MISSING:
        if _looks_like_dms_sequence(value):
            return _from_sequence(value, raw)
        if _is_number(value):
            return float(value)
        if isinstance(value, str):
            return parse_gps_string(value)

    # 3. .description を持つラッパー
    description = _get_field(raw, "description")
    if description is not _MISSING:
        if _is_number(description):
            return float(description)
        if isinstance(description, str):
            return parse_gps_string(description)

    # 4. シーケンス
    if _looks_like_dms_sequence(raw):
        return _from_sequence(raw, raw)

    # 5. 文字列
    if isinstance(raw, str):
        return parse_gps_string(raw)
    if isinstance(raw, bytes):
        return parse_gps_string(raw.decode("ascii", errors="replace").rstrip("\x00"))

    raise UnsupportedGpsFormat(f"Unsupported GPS tag format: {_describe(raw)}", raw_value=raw)


def _from_sequence(values: Sequence, raw: Any) -> float:
    """度・分・秒のシーケンスを変換（不足する分・秒は0）"""
    if len(values) > 3:
        raise UnsupportedGpsFormat(
            f"GPS tag has more than 3 components: {_describe(raw)}", raw_value=raw
        )

    if _is_rational_pair(values[0]):
        parts = []
        for element in values:
            if not _is_rational_pair(element):
                raise UnsupportedGpsFormat(
                    f"Mixed rational/non-rational GPS components: {_describe(raw)}",
                    raw_value=raw,
                )
            numerator, denominator = element
            if denominator == 0:
                raise UnsupportedGpsFormat(
                    f"Zero denominator in GPS tag: {_describe(raw)}", raw_value=raw
                )
            parts.append(float(numerator) / float(denominator))
        return combine_dms(*parts)

    if all(_is_number(element) for element in values):
        return combine_dms(*(float(element) for element in values))

    raise UnsupportedGpsFormat(f"Unsupported GPS sequence: {_describe(raw)}", raw_value=raw)


def _unwrap_ref(ref: Any) -> Optional[str]:
    if ref is None:
        return None

    value = _get_field(ref, "value")
    if value is not _MISSING:
        ref = value

    if _is_sequence(ref):
        ref = ref[0] if len(ref) > 0 else None

    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")

    if isinstance(ref, str):
        return ref.strip().rstrip("\x00") or None

    return None


def _get_field(obj: Any, name: str) -> Any:
    """属性またはキーからフィールドを取得（存在しない場合は_MISSING）"""
    if isinstance(obj, (str, bytes)) or _is_number(obj):
        return _MISSING
    if isinstance(obj, Mapping):
        return obj.get(name, _MISSING)
    return getattr(obj, name, _MISSING)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _looks_like_dms_sequence(value: Any) -> bool:
    if not _is_sequence(value) or len(value) == 0:
        return False
    return _is_rational_pair(value[0]) or all(_is_number(v) for v in value)


def _is_rational_pair(value: Any) -> bool:
    return _is_sequence(value) and len(value) == 2 and all(_is_number(v) for v in value)


def _describe(raw: Any) -> str:
    return truncate_text(repr(raw), max_length=120)

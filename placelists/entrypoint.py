"""CLIエントリーポイント"""
import argparse
import sys
from typing import Optional, Sequence

from .features.location.converters.gps_tag_converter import convert_gps_tag_to_decimal_degrees
from .features.location.domain.models import Coordinate
from .features.location.providers.exif_location_reader import extract_location_from_photo
from .features.location.services.coordinate_resolver import CoordinateResolver
from .features.location.utils.geometry import format_coordinate, haversine_distance_km, validate_coordinate
from .features.location.utils.map_utils import embedded_map_url, static_map_tile_url
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import InvalidCoordinates, PlaceListsError
from .shared.logging.config import get_logger, setup_logging
from .shared.utils.text import parse_float

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成"""
    parser = argparse.ArgumentParser(
        prog="placelists-location",
        description="場所リスト用の座標解決ツール（写真・住所・URLから緯度経度を取得）",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    parser.add_argument(
        "--precision",
        type=int,
        help="座標表示の小数点以下桁数（デフォルト: 設定値）",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    photo = subparsers.add_parser("photo", help="写真のEXIFから撮影位置を取得")
    photo.add_argument("path", help="画像ファイルのパス")

    geocode = subparsers.add_parser("geocode", help="住所から座標を取得")
    geocode.add_argument("address", help="住所・場所名")

    reverse = subparsers.add_parser("reverse", help="座標から住所を取得")
    reverse.add_argument("lat", help="緯度")
    reverse.add_argument("lng", help="経度")

    url = subparsers.add_parser("url", help="地図・ウェブページのURLから座標を取得")
    url.add_argument("url", help="URL")

    distance = subparsers.add_parser("distance", help="2点間の距離（km）を計算")
    distance.add_argument("lat1", help="1点目の緯度")
    distance.add_argument("lng1", help="1点目の経度")
    distance.add_argument("lat2", help="2点目の緯度")
    distance.add_argument("lng2", help="2点目の経度")

    map_parser = subparsers.add_parser("map", help="座標の地図タイル画像URLと埋め込みURLを表示")
    map_parser.add_argument("lat", help="緯度")
    map_parser.add_argument("lng", help="経度")
    map_parser.add_argument("--zoom", type=int, default=15, help="タイルのズームレベル（デフォルト: 15）")

    convert = subparsers.add_parser("convert", help="GPSタグの文字列を10進数の度に変換")
    convert.add_argument("tag", help='GPSタグ（例: "47 15 42.72" / "47°15\'42.72\\"" / "47.26187"）')
    convert.add_argument("--ref", help="半球参照（N/S/E/W）")

    return parser


def print_coordinate(coordinate: Coordinate, precision: int) -> None:
    """座標（と住所）を標準出力に表示"""
    print(format_coordinate(coordinate, precision))
    if coordinate.name:
        print(f"{coordinate.name} ({coordinate.place_type})" if coordinate.place_type else coordinate.name)
    if coordinate.address:
        print(coordinate.address)


def run_command(args: argparse.Namespace, settings: Settings) -> int:
    """
    サブコマンドを実行

    Returns:
        int: 終了コード
    """
    precision = settings.coordinate_precision

    if args.command == "photo":
        with open(args.path, "rb") as f:
            image_bytes = f.read()
        print_coordinate(extract_location_from_photo(image_bytes), precision)
        return 0

    if args.command == "convert":
        value = convert_gps_tag_to_decimal_degrees(args.tag, args.ref)
        print(f"{value:.{precision}f}")
        return 0

    if args.command == "distance":
        # 距離計算はジオコーダー不要
        a = _manual_coordinate(args.lat1, args.lng1)
        b = _manual_coordinate(args.lat2, args.lng2)
        print(f"{haversine_distance_km(a, b):.3f} km")
        return 0

    if args.command == "map":
        coordinate = _manual_coordinate(args.lat, args.lng)
        print(static_map_tile_url(coordinate, args.zoom))
        print(embedded_map_url(coordinate))
        return 0

    with CoordinateResolver.from_settings(settings) as resolver:
        if args.command == "geocode":
            print_coordinate(resolver.geocode_address(args.address), precision)
            return 0

        if args.command == "url":
            print_coordinate(resolver.extract_location_from_url(args.url), precision)
            return 0

        if args.command == "reverse":
            coordinate = resolver.from_manual_entry(args.lat, args.lng)
            address = resolver.reverse_geocode(coordinate)
            if address is None:
                print("No address found for the given coordinates", file=sys.stderr)
                return 1
            print(address)
            return 0

    raise ValueError(f"Unknown command: {args.command}")


def _manual_coordinate(lat: str, lng: str) -> Coordinate:
    lat_value = parse_float(lat)
    lng_value = parse_float(lng)
    if not validate_coordinate(lat_value, lng_value):
        raise InvalidCoordinates(f"Invalid coordinates: ({lat}, {lng})", lat=lat_value, lng=lng_value)
    return Coordinate(lat=lat_value, lng=lng_value)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗, 130: 中断）
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        # 設定を読み込み
        settings = Settings(_env_file=args.env_file)

        # 引数で設定を上書き
        if args.log_level:
            settings.log_level = args.log_level
        if args.precision is not None:
            settings.coordinate_precision = args.precision

        setup_logging(level=settings.log_level, force=True)

        logger.debug(f"Environment: {settings.environment}")
        logger.debug(f"Geocoding provider: {settings.geocoding_provider}")

        return run_command(args, settings)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except PlaceListsError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        print(f"Error: {e.user_message} ({e})", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())

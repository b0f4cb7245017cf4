"""CLIのテスト"""

from unittest.mock import MagicMock

import pytest

from placelists import entrypoint
from placelists.features.geocoding.domain.models import GeoLocation
from placelists.features.geocoding.services.geocoding_service import GeocodingService
from placelists.features.location.services.coordinate_resolver import CoordinateResolver


@pytest.fixture
def env_file(tmp_path) -> str:
    """空の環境変数ファイル"""
    path = tmp_path / ".env"
    path.write_text("")
    return str(path)


@pytest.fixture
def patched_resolver(monkeypatch, fake_geocoder) -> CoordinateResolver:
    """ジオコーダーを差し替えたリゾルバーをCLIに使わせる"""
    resolver = CoordinateResolver(GeocodingService(fake_geocoder), url_extractor=MagicMock())
    factory = MagicMock()
    factory.from_settings.return_value = resolver
    monkeypatch.setattr(entrypoint, "CoordinateResolver", factory)
    return resolver


@pytest.mark.unit
class TestOfflineCommands:
    """ジオコーダーを使わないコマンド"""

    def test_convert(self, env_file, capsys) -> None:
        """GPSタグの変換"""
        assert entrypoint.main(["--env-file", env_file, "convert", "47 15 42.72"]) == 0
        assert capsys.readouterr().out.strip() == "47.261867"

    def test_convert_with_ref(self, env_file, capsys) -> None:
        """半球参照付き"""
        assert entrypoint.main(["--env-file", env_file, "convert", "47.5", "--ref", "S"]) == 0
        assert capsys.readouterr().out.strip() == "-47.500000"

    def test_convert_unparsable(self, env_file, capsys) -> None:
        """解析できないタグ"""
        assert entrypoint.main(["--env-file", env_file, "convert", "north"]) == 1
        assert "Unrecognized GPS data" in capsys.readouterr().err

    def test_distance(self, env_file, capsys) -> None:
        """距離"""
        assert entrypoint.main(["--env-file", env_file, "distance", "0", "0", "0", "1"]) == 0
        assert capsys.readouterr().out.strip() == "111.195 km"

    def test_distance_invalid(self, env_file, capsys) -> None:
        """範囲外の座標"""
        assert entrypoint.main(["--env-file", env_file, "distance", "0", "0", "95", "-1"]) == 1
        assert "Invalid coordinates" in capsys.readouterr().err

    def test_map(self, env_file, capsys) -> None:
        """地図タイルURLと埋め込みURL"""
        assert entrypoint.main(["--env-file", env_file, "map", "0", "0", "--zoom", "1"]) == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert lines == [
            "https://tile.openstreetmap.org/1/1/1.png",
            "https://www.openstreetmap.org/export/embed.html"
            "?bbox=-0.01,-0.01,0.01,0.01&layer=mapnik&marker=0.0,0.0",
        ]

    def test_map_invalid(self, env_file, capsys) -> None:
        """範囲外の座標"""
        assert entrypoint.main(["--env-file", env_file, "map", "91", "0"]) == 1
        assert "Invalid coordinates" in capsys.readouterr().err

    def test_photo(self, env_file, tmp_path, jpeg_with_gps, capsys) -> None:
        """写真の撮影位置"""
        photo = tmp_path / "photo.jpg"
        photo.write_bytes(jpeg_with_gps)

        assert entrypoint.main(["--env-file", env_file, "photo", str(photo)]) == 0
        assert capsys.readouterr().out.strip() == "47.261867, 11.394539"

    def test_photo_precision(self, env_file, tmp_path, jpeg_with_gps, capsys) -> None:
        """--precision"""
        photo = tmp_path / "photo.jpg"
        photo.write_bytes(jpeg_with_gps)

        assert entrypoint.main(["--env-file", env_file, "--precision", "2", "photo", str(photo)]) == 0
        assert capsys.readouterr().out.strip() == "47.26, 11.39"

    def test_photo_without_gps(self, env_file, tmp_path, jpeg_without_gps, capsys) -> None:
        """位置情報のない写真"""
        photo = tmp_path / "photo.jpg"
        photo.write_bytes(jpeg_without_gps)

        assert entrypoint.main(["--env-file", env_file, "photo", str(photo)]) == 1
        assert "No GPS data found in image" in capsys.readouterr().err

    def test_missing_photo(self, env_file, tmp_path) -> None:
        """存在しないファイル"""
        assert entrypoint.main(["--env-file", env_file, "photo", str(tmp_path / "missing.jpg")]) == 1


@pytest.mark.unit
class TestGeocodingCommands:
    """ジオコーダーを使うコマンド"""

    def test_geocode(self, env_file, patched_resolver, capsys) -> None:
        """住所検索"""
        assert entrypoint.main(["--env-file", env_file, "geocode", "Seattle"]) == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert lines == ["47.606200, -122.332100", "Seattle, King County, Washington, United States"]

    def test_geocode_prints_place_name(self, env_file, monkeypatch, geocoder_factory, capsys) -> None:
        """場所名と種別も表示"""
        geocoder = geocoder_factory(
            result=GeoLocation(
                latitude=47.6097,
                longitude=-122.3422,
                formatted_address="85 Pike St, Seattle, WA 98101, USA",
                name="Pike Place Market",
                types=["point_of_interest"],
            )
        )
        factory = MagicMock()
        factory.from_settings.return_value = CoordinateResolver(GeocodingService(geocoder), url_extractor=MagicMock())
        monkeypatch.setattr(entrypoint, "CoordinateResolver", factory)

        assert entrypoint.main(["--env-file", env_file, "geocode", "Pike Place Market"]) == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[1:] == ["Pike Place Market (attraction)", "85 Pike St, Seattle, WA 98101, USA"]

    def test_geocode_not_found(self, env_file, monkeypatch, geocoder_factory, capsys) -> None:
        """見つからない住所"""
        factory = MagicMock()
        factory.from_settings.return_value = CoordinateResolver(
            GeocodingService(geocoder_factory()), url_extractor=MagicMock()
        )
        monkeypatch.setattr(entrypoint, "CoordinateResolver", factory)

        assert entrypoint.main(["--env-file", env_file, "geocode", "nowhere"]) == 1
        assert "Address not found" in capsys.readouterr().err

    def test_reverse(self, env_file, patched_resolver, capsys) -> None:
        """逆ジオコーディング（負の値も位置引数として受け付ける）"""
        assert entrypoint.main(["--env-file", env_file, "reverse", "47.6062", "-122.3321"]) == 0
        assert capsys.readouterr().out.strip() == "Seattle, King County, Washington, United States"

    def test_reverse_no_address(self, env_file, monkeypatch, geocoder_factory, capsys) -> None:
        """住所なし"""
        factory = MagicMock()
        factory.from_settings.return_value = CoordinateResolver(
            GeocodingService(geocoder_factory()), url_extractor=MagicMock()
        )
        monkeypatch.setattr(entrypoint, "CoordinateResolver", factory)

        assert entrypoint.main(["--env-file", env_file, "reverse", "10", "20"]) == 1
        assert "No address found" in capsys.readouterr().err

    def test_url(self, env_file, patched_resolver, capsys) -> None:
        """URL抽出"""
        patched_resolver.url_extractor.extract.return_value = patched_resolver.from_map_click(1.5, 2.5)

        assert entrypoint.main(["--env-file", env_file, "url", "https://example.com/place"]) == 0
        assert capsys.readouterr().out.strip() == "1.500000, 2.500000"


@pytest.mark.unit
def test_interrupted(env_file, monkeypatch) -> None:
    """Ctrl+C は130"""
    monkeypatch.setattr(entrypoint, "run_command", MagicMock(side_effect=KeyboardInterrupt))

    assert entrypoint.main(["--env-file", env_file, "distance", "0", "0", "0", "0"]) == 130


@pytest.mark.unit
def test_command_is_required() -> None:
    """サブコマンドなしは使い方エラー"""
    with pytest.raises(SystemExit):
        entrypoint.main([])

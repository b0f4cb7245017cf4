"""アプリケーション設定（Pydantic Settings）"""
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="placelists-location",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # Geocoding
    geocoding_provider: Literal["nominatim", "google"] = Field(
        default="nominatim",
        description="ジオコーディングプロバイダー",
    )
    nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Nominatim APIのベースURL",
    )
    geocoding_user_agent: str = Field(
        default="LO Place App (https://llllllo.com)",
        description="ジオコーディングリクエストのUser-Agent（Nominatimの利用規約で必須）",
    )
    geocoding_accept_language: str = Field(
        default="en-US,en",
        description="ジオコーディング結果の言語",
    )
    geocoding_timeout: int = Field(
        default=10,
        description="ジオコーディングのタイムアウト（秒）",
    )
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Google Maps API Key（geocoding_provider=google の場合に必須）",
    )

    # Device location
    device_location_timeout_ms: int = Field(
        default=10000,
        description="端末位置情報取得のタイムアウト（ミリ秒）",
    )
    device_location_max_age_ms: int = Field(
        default=60000,
        description="キャッシュされた位置情報の最大経過時間（ミリ秒）",
    )

    # Display
    coordinate_precision: int = Field(
        default=6,
        description="座標表示の小数点以下桁数",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("geocoding_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


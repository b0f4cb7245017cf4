"""設定からジオコーダーを生成"""
from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import ConfigurationError
from ....shared.logging.config import get_logger
from .base import Geocoder
from .google_maps_geocoder import GoogleMapsGeocoder
from .nominatim_geocoder import NominatimGeocoder

logger = get_logger(__name__)


def create_geocoder(settings: Settings) -> Geocoder:
    """
    設定に応じたジオコーダーを生成

    Args:
        settings: アプリケーション設定

    Returns:
        Geocoder: NominatimGeocoder または GoogleMapsGeocoder

    Raises:
        ConfigurationError: Googleを指定してAPIキーがない場合など
    """
    provider = settings.geocoding_provider
    logger.debug(f"Creating geocoder: provider={provider}")

    if provider == "nominatim":
        return NominatimGeocoder(
            user_agent=settings.geocoding_user_agent,
            base_url=settings.nominatim_base_url,
            accept_language=settings.geocoding_accept_language,
            timeout=settings.geocoding_timeout,
        )

    if provider == "google":
        return GoogleMapsGeocoder(
            api_key=settings.google_maps_api_key,
            timeout=settings.geocoding_timeout,
            language=settings.geocoding_accept_language.split(",")[0] or None,
        )

    raise ConfigurationError(f"Unknown geocoding provider: {provider}")

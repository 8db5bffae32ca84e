"""Best-effort IP geolocation for proposal view tracking."""
import ipaddress
import logging
from typing import Optional

import httpx

from proposal_maker.config.settings import get_settings

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "unknown"


def lookup_location(ip_address: str, http_client: Optional[httpx.Client] = None) -> str:
    """Return ``"city, region, country"`` for *ip_address*.

    Never raises: any failure (network, status, payload) yields ``"unknown"``
    so that view tracking is not blocked by the lookup service.
    """
    if not ip_address or ip_address == UNKNOWN_LOCATION:
        return UNKNOWN_LOCATION
    try:
        ipaddress.ip_address(ip_address)
    except ValueError:
        # X-Forwarded-For is client supplied and ends up in the lookup URL
        logger.warning("Skipping geo lookup for a malformed viewer address")
        return UNKNOWN_LOCATION

    settings = get_settings()
    url = settings.geo_lookup_url.format(ip=ip_address)

    try:
        if http_client is not None:
            response = http_client.get(url, timeout=settings.geo_lookup_timeout_seconds)
        else:
            with httpx.Client(timeout=settings.geo_lookup_timeout_seconds) as client:
                response = client.get(url)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Geo lookup failed for view: {e}")
        return UNKNOWN_LOCATION

    if not isinstance(data, dict) or data.get("error"):
        logger.warning("Geo lookup returned no location")
        return UNKNOWN_LOCATION

    parts = [data.get("city"), data.get("region"), data.get("country_name")]
    if not any(parts):
        return UNKNOWN_LOCATION
    return ", ".join(str(p) if p else UNKNOWN_LOCATION for p in parts)

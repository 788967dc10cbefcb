"""Source and location labels attached to click events."""

import ipaddress
from typing import Mapping, Optional
from urllib.parse import urlparse, parse_qs

DIRECT = "direct"
LOCAL = "local"
UNKNOWN = "unknown"

# Referrer host suffix -> label
KNOWN_SOURCES = {
    "facebook.com": "facebook",
    "fb.me": "facebook",
    "instagram.com": "instagram",
    "twitter.com": "twitter",
    "x.com": "twitter",
    "t.co": "twitter",
    "linkedin.com": "linkedin",
    "lnkd.in": "linkedin",
    "reddit.com": "reddit",
    "youtube.com": "youtube",
    "google.com": "google",
    "bing.com": "bing",
    "duckduckgo.com": "duckduckgo",
    "t.me": "telegram",
    "whatsapp.com": "whatsapp",
}

# Proxy/CDN headers carrying a resolved location, checked in order
LOCATION_HEADERS = ("cf-ipcountry", "x-client-location", "x-geo-country")


def _label_for_host(host: str) -> str:
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    for suffix, label in KNOWN_SOURCES.items():
        if host == suffix or host.endswith("." + suffix):
            return label
    return host


def source_label(referer: Optional[str], query: str = "") -> str:
    """Label where a click came from.

    An explicit ``utm_source`` query parameter wins; otherwise the referrer
    host, folded to a well-known name where one matches.
    """
    utm_source = parse_qs(query).get("utm_source")
    if utm_source and utm_source[0].strip():
        return utm_source[0].strip().lower()

    if not referer:
        return DIRECT

    host = urlparse(referer).hostname
    if not host:
        return DIRECT
    return _label_for_host(host)


def is_private_ip(ip: Optional[str]) -> bool:
    """Check if an address is loopback, private or link-local."""
    if not ip:
        return False
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return addr.is_private or addr.is_loopback or addr.is_link_local


def location_label(headers: Mapping[str, str], client_ip: Optional[str] = None) -> str:
    """Label where a click came from geographically.

    Uses a location header set by the fronting proxy when present. No
    geo-IP lookup is made; clients on private networks are labelled local.
    """
    headers_lower = {k.lower(): v for k, v in headers.items()}
    for name in LOCATION_HEADERS:
        value = (headers_lower.get(name) or "").strip()
        # Cloudflare sends XX for unknown
        if value and value.upper() != "XX":
            return value

    if is_private_ip(client_ip):
        return LOCAL
    return UNKNOWN

"""Tests for common utilities."""

import logging

from shortlink.common.validators import is_valid_url, is_valid_short_code, is_reserved
from shortlink.common.headers import (
    extract_forwarded_headers,
    build_base_url,
    get_forwarded_path_prefix,
    get_client_ip,
)
from shortlink.common.labels import source_label, location_label, is_private_ip
from shortlink.common.url_builder import build_short_url
from shortlink.common.logging_config import setup_logging, get_logger


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        """Test valid URL validation."""
        valid, _ = is_valid_url("https://example.com")
        assert valid

        valid, _ = is_valid_url("http://example.com/path")
        assert valid

        valid, _ = is_valid_url("https://sub.example.com:8080/path?query=value")
        assert valid

    def test_invalid_urls(self):
        """Test invalid URL validation."""
        valid, error = is_valid_url("")
        assert not valid
        assert "required" in error.lower()

        valid, error = is_valid_url("not-a-url")
        assert not valid

        valid, error = is_valid_url("ftp://example.com")
        assert not valid
        assert "http" in error.lower()

        valid, error = is_valid_url("https://")
        assert not valid
        assert "domain" in error.lower()

    def test_url_with_whitespace(self):
        """Test URLs containing whitespace are rejected."""
        valid, error = is_valid_url("https://exa mple.com")
        assert not valid
        assert "whitespace" in error.lower()

    def test_url_with_bad_port(self):
        """Test out-of-range port is rejected."""
        valid, error = is_valid_url("https://example.com:99999/")
        assert not valid
        assert "invalid url format" in error.lower()

    def test_url_too_long(self):
        """Test URL length limit."""
        valid, error = is_valid_url("https://example.com/" + "a" * 2048)
        assert not valid
        assert "too long" in error.lower()

    def test_valid_short_codes(self):
        """Test valid short code validation."""
        valid, _ = is_valid_short_code("abc123")
        assert valid

        valid, _ = is_valid_short_code("test-code")
        assert valid

        valid, _ = is_valid_short_code("test_code")
        assert valid

    def test_invalid_short_codes(self):
        """Test invalid short code validation."""
        valid, error = is_valid_short_code("abc")
        assert not valid
        assert "at least" in error.lower()

        valid, error = is_valid_short_code("a" * 25)
        assert not valid
        assert "at most" in error.lower()

        valid, error = is_valid_short_code("abc@123")
        assert not valid

        valid, error = is_valid_short_code("stats")
        assert not valid
        assert "reserved" in error.lower()

    def test_reserved_is_case_insensitive(self):
        """Test reserved words match regardless of case."""
        assert is_reserved("HEALTH")
        assert is_reserved("Shorten")
        assert not is_reserved("abc123")


class TestHeaders:
    """Test header utilities."""

    def test_extract_forwarded_headers(self):
        """Test forwarded header extraction."""
        headers = {
            "X-Forwarded-Proto": "https",
            "X-Forwarded-Host": "example.com",
            "X-Forwarded-For": "1.2.3.4",
        }

        result = extract_forwarded_headers(headers)
        assert result["forwarded_proto"] == "https"
        assert result["forwarded_host"] == "example.com"
        assert result["forwarded_for"] == "1.2.3.4"

    def test_build_base_url_from_headers(self):
        """Test base URL building from headers."""
        headers = {
            "X-Forwarded-Proto": "https",
            "X-Forwarded-Host": "example.com",
        }

        base_url = build_base_url(headers=headers, fallback_base_url="http://localhost:9200")

        assert base_url == "https://example.com"

    def test_build_base_url_from_request(self):
        """Test base URL from request scheme and host."""
        base_url = build_base_url(
            headers={},
            fallback_base_url="http://localhost:9200",
            request_scheme="http",
            request_host="short.test",
        )

        assert base_url == "http://short.test"

    def test_build_base_url_fallback(self):
        """Test base URL fallback."""
        base_url = build_base_url(headers={}, fallback_base_url="http://localhost:9200/")

        assert base_url == "http://localhost:9200"

    def test_forwarded_path_prefix(self):
        """Test X-Forwarded-Prefix normalization."""
        assert get_forwarded_path_prefix({"X-Forwarded-Prefix": "s/"}) == "/s"
        assert get_forwarded_path_prefix({"X-Forwarded-Prefix": "/"}) == ""
        assert get_forwarded_path_prefix({}) == ""

    def test_client_ip_prefers_first_forwarded_hop(self):
        """Test client IP from X-Forwarded-For."""
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.2"}

        assert get_client_ip(headers, "10.0.0.1") == "203.0.113.7"
        assert get_client_ip({}, "10.0.0.1") == "10.0.0.1"
        assert get_client_ip({}) is None


class TestLabels:
    """Test click label derivation."""

    def test_no_referer_is_direct(self):
        """Test missing referrer gives direct."""
        assert source_label(None) == "direct"
        assert source_label("") == "direct"

    def test_known_referers(self):
        """Test well-known referrers fold to names."""
        assert source_label("https://www.facebook.com/some/post") == "facebook"
        assert source_label("https://m.facebook.com/") == "facebook"
        assert source_label("https://t.co/abc") == "twitter"
        assert source_label("https://www.google.com/search?q=x") == "google"

    def test_unknown_referer_uses_host(self):
        """Test other referrers use the bare host."""
        assert source_label("https://www.blog.example.org/post") == "blog.example.org"

    def test_utm_source_wins(self):
        """Test utm_source overrides the referrer."""
        assert source_label("https://facebook.com/", "utm_source=Newsletter") == "newsletter"

    def test_location_from_proxy_header(self):
        """Test proxy geo header is used."""
        assert location_label({"CF-IPCountry": "GB"}, "203.0.113.7") == "GB"
        assert location_label({"X-Client-Location": "London, UK"}) == "London, UK"

    def test_location_unknown_country_code_ignored(self):
        """Test Cloudflare XX falls through."""
        assert location_label({"CF-IPCountry": "XX"}, "203.0.113.7") == "unknown"

    def test_location_private_ip(self):
        """Test private and loopback clients are local."""
        assert location_label({}, "127.0.0.1") == "local"
        assert location_label({}, "192.168.1.20") == "local"
        assert location_label({}, "8.8.8.8") == "unknown"
        assert location_label({}, None) == "unknown"

    def test_is_private_ip(self):
        """Test private address detection."""
        assert is_private_ip("10.1.2.3")
        assert is_private_ip("::1")
        assert not is_private_ip("8.8.8.8")
        assert not is_private_ip("not-an-ip")
        assert not is_private_ip(None)


class TestURLBuilder:
    """Test URL building utilities."""

    def test_build_short_url_no_prefix(self):
        """Test short URL building without prefix."""
        url = build_short_url(short_code="abc123", base_url="https://example.com", path_prefix="")

        assert url == "https://example.com/abc123"

    def test_build_short_url_with_prefix(self):
        """Test short URL building with prefix."""
        url = build_short_url(short_code="abc123", base_url="https://example.com/", path_prefix="/s/")

        assert url == "https://example.com/s/abc123"


class TestLogging:
    """Test logging setup."""

    def test_setup_logging_is_idempotent(self):
        """Test repeated setup keeps one console handler."""
        setup_logging(level="DEBUG")
        logger = setup_logging(level="WARNING")

        assert logger.name == "shortlink"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_setup_logging_with_file(self, tmp_path):
        """Test file handler is added."""
        log_file = tmp_path / "shortlink.log"
        logger = setup_logging(level="INFO", log_file=str(log_file), json_format=True)

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert '"message": "hello"' in log_file.read_text()

        setup_logging(level="INFO")

    def test_get_logger_namespace(self):
        """Test component loggers live under shortlink."""
        assert get_logger("service").name == "shortlink.service"
        assert get_logger().name == "shortlink"

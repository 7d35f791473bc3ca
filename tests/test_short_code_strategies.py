"""
Tests for short code derivation strategies.
"""
import string

from shortener_app.services.short_code_strategies import (
    Sha1ShortCodeStrategy,
    Sha256ShortCodeStrategy
)
from shortener_app.services.short_code_factory import (
    ShortCodeFactory,
    ShortCodeStrategyType,
    derive_short_code
)

URL_SAFE = set(string.ascii_letters + string.digits + "-_")


class TestSha1Strategy:
    """Test the default SHA-1 + base64 strategy"""

    def test_same_url_same_code(self):
        strategy = Sha1ShortCodeStrategy()

        assert strategy.generate("https://example.com/") == strategy.generate("https://example.com/")

    def test_fixed_length(self):
        strategy = Sha1ShortCodeStrategy()

        lengths = {len(strategy.generate(url)) for url in ["a", "https://example.com/", "x" * 5000]}

        assert lengths == {27}

    def test_url_safe_characters(self):
        strategy = Sha1ShortCodeStrategy()

        for i in range(200):
            assert set(strategy.generate(f"https://example.com/?page={i}")) <= URL_SAFE

    def test_known_value(self):
        """base64url(sha1("https://example.com/")) without padding"""
        strategy = Sha1ShortCodeStrategy()

        assert strategy.generate("https://example.com/") == "tVnH7dP7ZzdMGiXnOc3X7dHXmUk"

    def test_distinct_urls_distinct_codes(self):
        strategy = Sha1ShortCodeStrategy()
        urls = [f"https://example.com/item/{i}" for i in range(5000)]
        urls += ["https://example.com", "https://example.com/", "http://example.com/"]

        codes = {strategy.generate(url) for url in urls}

        assert len(codes) == len(urls)

    def test_empty_string_is_valid_input(self):
        assert len(Sha1ShortCodeStrategy().generate("")) == 27


class TestSha256Strategy:

    def test_fixed_length(self):
        assert len(Sha256ShortCodeStrategy().generate("https://example.com/")) == 43

    def test_differs_from_sha1(self):
        url = "https://example.com/"
        assert Sha256ShortCodeStrategy().generate(url) != Sha1ShortCodeStrategy().generate(url)


class TestShortCodeFactory:
    """Test strategy factory"""

    def test_creates_sha1_strategy(self):
        strategy = ShortCodeFactory.create_strategy(ShortCodeStrategyType.SHA1)
        assert isinstance(strategy, Sha1ShortCodeStrategy)

    def test_creates_sha256_strategy(self):
        strategy = ShortCodeFactory.create_strategy(ShortCodeStrategyType.SHA256)
        assert isinstance(strategy, Sha256ShortCodeStrategy)

    def test_returns_cached_instance(self):
        first = ShortCodeFactory.create_strategy(ShortCodeStrategyType.SHA1)
        second = ShortCodeFactory.create_strategy(ShortCodeStrategyType.SHA1)
        assert first is second

    def test_derive_uses_settings_default(self):
        assert derive_short_code("https://example.com/") == Sha1ShortCodeStrategy().generate(
            "https://example.com/"
        )

"""
Tests for session tokens and the trusted-subnet check.
"""
import jwt

from shortener_app.auth.session import build_token, decode_user_id
from shortener_app.config import settings
from shortener_app.network import is_trusted


class TestSessionTokens:

    def test_round_trip(self):
        token = build_token("user-42")
        assert decode_user_id(token) == "user-42"

    def test_expired_token_is_rejected(self):
        token = build_token("user-42", expires_in=-10)
        assert decode_user_id(token) is None

    def test_token_signed_with_other_key_is_rejected(self):
        token = jwt.encode({"sub": "user-42"}, settings.secret_key + "-other", algorithm="HS256")
        assert decode_user_id(token) is None

    def test_garbage_and_missing(self):
        assert decode_user_id("not-a-token") is None
        assert decode_user_id("") is None
        assert decode_user_id(None) is None

    def test_token_without_subject(self):
        token = jwt.encode({"foo": "bar"}, settings.secret_key, algorithm="HS256")
        assert decode_user_id(token) is None


class TestTrustedSubnet:

    def test_inside(self):
        assert is_trusted("192.168.1.10", "192.168.1.0/24")

    def test_outside(self):
        assert not is_trusted("10.0.0.1", "192.168.1.0/24")

    def test_no_subnet_configured(self):
        assert not is_trusted("192.168.1.10", "")

    def test_missing_or_bad_ip(self):
        assert not is_trusted(None, "192.168.1.0/24")
        assert not is_trusted("not-an-ip", "192.168.1.0/24")

    def test_bad_subnet(self):
        assert not is_trusted("192.168.1.10", "garbage")

    def test_ipv6(self):
        assert is_trusted("2001:db8::1", "2001:db8::/32")
        assert not is_trusted("192.168.1.10", "2001:db8::/32")

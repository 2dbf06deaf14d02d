"""Tests for credential parsing"""
import json
import pytest
from prompt_relay.credentials import (
    CredentialsError,
    from_args,
    from_config,
    from_secret,
    mask_secret,
)


def test_from_args():
    """Test credentials from positional arguments"""
    credentials = from_args("https://api.example/v1/chat", "sk-test")

    assert credentials.endpoint == "https://api.example/v1/chat"
    assert credentials.api_key.get_secret_value() == "sk-test"


def test_repr_hides_key():
    """Test that the key never appears in repr"""
    credentials = from_args("https://api.example/v1/chat", "sk-very-secret")
    assert "sk-very-secret" not in repr(credentials)


class TestFromConfig:
    """Tests for configuration-string credentials"""

    def test_openai_section(self):
        """Test parsing {"openai": {"url", "apiKey"}}"""
        config = json.dumps({"openai": {"url": "https://api.example/v1/chat", "apiKey": "sk-test"}})
        credentials = from_config(config)

        assert credentials.endpoint == "https://api.example/v1/chat"
        assert credentials.api_key.get_secret_value() == "sk-test"

    def test_falls_back_to_openai_section(self):
        """Test that other providers read the openai section when theirs is absent"""
        config = json.dumps({"openai": {"url": "https://u", "apiKey": "k"}})
        assert from_config(config, provider="anthropic").endpoint == "https://u"

    def test_invalid_json_raises(self):
        """Test that malformed JSON raises a decode error"""
        with pytest.raises(json.JSONDecodeError):
            from_config("{not json")

    def test_missing_section_raises(self):
        """Test missing provider section"""
        with pytest.raises(CredentialsError, match="no 'openai' section"):
            from_config(json.dumps({"other": {}}))

    def test_missing_key_raises(self):
        """Test that a section without apiKey is rejected"""
        with pytest.raises(CredentialsError, match="apiKey"):
            from_config(json.dumps({"openai": {"url": "https://u"}}))


class TestFromSecret:
    """Tests for secret-payload credentials"""

    def test_flat_payload(self):
        """Test {"url", "apiKey"} payload"""
        credentials = from_secret(json.dumps({"url": "https://api.anthropic.com/v1/messages", "apiKey": "sk-ant"}))

        assert credentials.endpoint == "https://api.anthropic.com/v1/messages"
        assert credentials.api_key.get_secret_value() == "sk-ant"

    def test_nested_payload(self):
        """Test {"openai": {...}} payload"""
        credentials = from_secret(json.dumps({"openai": {"url": "https://o", "apiKey": "k"}}))
        assert credentials.endpoint == "https://o"

    def test_nested_prefers_provider_section(self):
        """Test that the requested provider section wins"""
        secret = json.dumps({
            "openai": {"url": "https://o", "apiKey": "k1"},
            "anthropic": {"url": "https://a", "apiKey": "k2"},
        })
        assert from_secret(secret, provider="anthropic").endpoint == "https://a"

    def test_empty_secret_raises(self):
        """Test that an empty secret is rejected"""
        with pytest.raises(CredentialsError, match="empty"):
            from_secret("")

    def test_non_object_raises(self):
        """Test that a JSON array is rejected"""
        with pytest.raises(CredentialsError, match="JSON object"):
            from_secret("[1, 2]")


class TestMaskSecret:
    """Tests for secret masking"""

    def test_long_value(self):
        assert mask_secret("sk-abcdefghijklmnop") == "sk-...mnop"

    def test_short_value(self):
        assert mask_secret("sk-test") == "***"

    def test_empty_value(self):
        assert mask_secret("") == ""
        assert mask_secret(None) == ""

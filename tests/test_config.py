"""Tests for configuration loading and validation."""

import pytest

from mavilda.config import (
    AppConfig,
    BusinessConfig,
    ConversationConfig,
    ServerConfig,
    _safe_int,
    _validate_config,
)


def _config_with(conversation=None, server=None) -> AppConfig:
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "business", BusinessConfig())
    object.__setattr__(config, "conversation", conversation or ConversationConfig())
    object.__setattr__(config, "server", server or ServerConfig())
    object.__setattr__(config, "log_level", "INFO")
    return config


def _conversation(**overrides) -> ConversationConfig:
    values = {
        "name_max_length": 30,
        "contact_prompt_min_messages": 5,
        "phone_min_digits": 8,
        "recommend_small_max_ha": 300,
        "recommend_medium_max_ha": 500,
        "max_message_length": 2000,
    }
    values.update(overrides)
    conv = ConversationConfig.__new__(ConversationConfig)
    for key, value in values.items():
        object.__setattr__(conv, key, value)
    return conv


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_default_thresholds(self):
        conv = AppConfig().conversation
        assert conv.name_max_length == 30
        assert conv.contact_prompt_min_messages == 5
        assert conv.recommend_small_max_ha == 300
        assert conv.recommend_medium_max_ha == 500

    def test_invalid_name_length(self):
        with pytest.raises(ValueError, match="NAME_MAX_LENGTH"):
            _validate_config(_config_with(conversation=_conversation(name_max_length=1)))

    def test_invalid_contact_prompt_threshold(self):
        config = _config_with(conversation=_conversation(contact_prompt_min_messages=0))
        with pytest.raises(ValueError, match="CONTACT_PROMPT_MIN_MESSAGES"):
            _validate_config(config)

    def test_invalid_phone_digits(self):
        config = _config_with(conversation=_conversation(phone_min_digits=20))
        with pytest.raises(ValueError, match="PHONE_MIN_DIGITS"):
            _validate_config(config)

    def test_medium_band_must_exceed_small_band(self):
        config = _config_with(
            conversation=_conversation(recommend_small_max_ha=500, recommend_medium_max_ha=300)
        )
        with pytest.raises(ValueError, match="RECOMMEND_MEDIUM_MAX_HA"):
            _validate_config(config)

    def test_invalid_port(self):
        server = ServerConfig.__new__(ServerConfig)
        object.__setattr__(server, "host", "0.0.0.0")
        object.__setattr__(server, "port", 70000)
        object.__setattr__(server, "version", "2.0")
        with pytest.raises(ValueError, match="PORT"):
            _validate_config(_config_with(server=server))

    def test_safe_int_parsing(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("MAVILDA_TEST_BAD_INT", "abc")
        with pytest.raises(ValueError, match="MAVILDA_TEST_BAD_INT"):
            _safe_int("MAVILDA_TEST_BAD_INT", "1")

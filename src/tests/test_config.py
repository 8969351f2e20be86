"""
Tests for environment-driven configuration.
"""

import pytest

from bilingual_srt.config import DEFAULT_MODEL, TranslatorConfig
from bilingual_srt.errors import ConfigurationError


def test_defaults_from_empty_environment():
    config = TranslatorConfig.from_env({})

    assert config.api_key == ""
    assert config.model == DEFAULT_MODEL
    assert config.timeout_ms == 240000
    assert config.timeout_seconds == 240.0
    assert config.min_blocks_per_chunk == 50
    assert config.max_retries == 3
    assert config.max_concurrent == 1
    assert config.language_tag == "zh-CN"


def test_values_from_environment():
    config = TranslatorConfig.from_env(
        {
            "OPENAI_KEY": "sk-fallback",
            "OPENAI_MODEL": "gpt-4o-mini",
            "OPENAI_TIMEOUT_MS": "1500",
            "MIN_BLOCKS_PER_CHUNK": "20",
            "MAX_RETRIES": "5",
            "MAX_CONCURRENT": "3",
            "OUTPUT_LANGUAGE_TAG": "zh-TW",
        }
    )

    assert config.api_key == "sk-fallback"
    assert config.model == "gpt-4o-mini"
    assert config.timeout_seconds == 1.5
    assert config.min_blocks_per_chunk == 20
    assert config.max_retries == 5
    assert config.max_concurrent == 3
    assert config.language_tag == "zh-TW"


def test_primary_key_wins_over_fallback():
    config = TranslatorConfig.from_env({"OPENAI_API_KEY": "sk-main", "OPENAI_KEY": "sk-old"})
    assert config.api_key == "sk-main"


@pytest.mark.parametrize("raw", ["abc", "0", "-5", "  "])
def test_bad_integers_fall_back_to_default(raw):
    config = TranslatorConfig.from_env({"OPENAI_TIMEOUT_MS": raw, "MAX_RETRIES": raw})
    assert config.timeout_ms == 240000
    assert config.max_retries == 3


def test_require_api_key():
    assert TranslatorConfig(api_key="sk-x").require_api_key() == "sk-x"
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        TranslatorConfig().require_api_key()

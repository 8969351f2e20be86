"""
Tests for the command-line entry point.
"""

import pytest

from bilingual_srt import cli
from bilingual_srt.config import TranslatorConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(cli, "load_environment", lambda: None)
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_KEY",
        "OPENAI_MODEL",
        "OPENAI_TIMEOUT_MS",
        "MIN_BLOCKS_PER_CHUNK",
        "MAX_RETRIES",
        "MAX_CONCURRENT",
        "OUTPUT_LANGUAGE_TAG",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_argument_prints_usage(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([])

    assert exc.value.code != 0
    assert "usage" in capsys.readouterr().err


def test_missing_api_key_exits_nonzero(tmp_path):
    src = tmp_path / "a.srt"
    src.write_text("1\n00:00:01,000 --> 00:00:02,000\nHi", encoding="utf-8")

    assert cli.main([str(src)]) == 1
    assert not (tmp_path / "a.zh-CN.srt").exists()


def test_missing_input_file(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    assert cli.main([str(tmp_path / "nope.srt")]) == 1
    assert "The file was not found" in caplog.text


def test_flags_override_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("MIN_BLOCKS_PER_CHUNK", "10")
    args = cli.parse_args(["in.srt", "--min-blocks", "25", "--model", "m", "--max-concurrent", "2"])

    config = cli.build_config(args)

    assert config == TranslatorConfig(
        api_key="sk-test", model="m", min_blocks_per_chunk=25, max_concurrent=2
    )


def test_successful_run(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    src = tmp_path / "a.srt"
    src.write_text("1\n00:00:01,000 --> 00:00:02,000\nHi", encoding="utf-8")
    seen = {}

    async def fake_run_pipeline(config, input_path):
        seen["config"] = config
        out = tmp_path / "a.zh-CN.srt"
        out.write_text("done", encoding="utf-8")
        return out

    monkeypatch.setattr(cli, "run_pipeline", fake_run_pipeline)

    assert cli.main([str(src), "--timeout-ms", "1000"]) == 0
    assert seen["config"].timeout_ms == 1000

from __future__ import annotations

from pathlib import Path

import pytest

from prepx.exceptions import ConfigError
from prepx.settings import Settings, load_config_file, load_env_overrides, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PREPX_REPO", "PREPX_OUTPUT_NAME", "PREPX_SNIFF_BYTES", "PREPX_ENCODING", "PREPX_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.repo is None
    assert settings.output_name == "llm_context.txt"
    assert settings.sniff_bytes == 1024
    assert settings.encoding == "utf-8"
    assert settings.verbose is False


@pytest.mark.unit
def test_load_config_file_reads_mapping(tmp_path: Path) -> None:
    cfg = tmp_path / "prepx.yaml"
    cfg.write_text("output_name: context.txt\nsniff_bytes: 4096\n", encoding="utf-8")

    assert load_config_file(cfg) == {"output_name": "context.txt", "sniff_bytes": 4096}


@pytest.mark.unit
def test_load_config_file_empty_file(tmp_path: Path) -> None:
    cfg = tmp_path / "prepx.yaml"
    cfg.write_text("", encoding="utf-8")

    assert load_config_file(cfg) == {}


@pytest.mark.unit
@pytest.mark.parametrize("content", ["- just\n- a list\n", "key: [unclosed\n"])
def test_load_config_file_rejects_invalid_content(tmp_path: Path, content: str) -> None:
    cfg = tmp_path / "prepx.yaml"
    cfg.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config_file(cfg)


@pytest.mark.unit
def test_load_config_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc_info:
        load_config_file(tmp_path / "missing.yaml")

    assert exc_info.value.path == tmp_path / "missing.yaml"


@pytest.mark.unit
def test_load_env_overrides_reads_prefixed_variables(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("PREPX_OUTPUT_NAME=from_dotenv.txt\nPREPX_SNIFF_BYTES=2048\nOTHER=1\n", encoding="utf-8")
    monkeypatch.setenv("PREPX_OUTPUT_NAME", "from_env.txt")
    monkeypatch.setenv("PREPX_UNKNOWN", "ignored")

    overrides = load_env_overrides(str(env_file))

    assert overrides == {"output_name": "from_env.txt", "sniff_bytes": "2048"}


@pytest.mark.unit
def test_load_settings_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".prepx.yaml").write_text(
        "output_name: from_file.txt\nsniff_bytes: 2048\nencoding: latin-1\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("PREPX_SNIFF_BYTES", "4096")

    settings = load_settings({"encoding": "utf-8", "verbose": None}, env_file="", cwd=tmp_path)

    assert settings.output_name == "from_file.txt"
    assert settings.sniff_bytes == 4096
    assert settings.encoding == "utf-8"
    assert settings.verbose is False


@pytest.mark.unit
def test_load_settings_without_config_file(tmp_path: Path) -> None:
    assert load_settings(env_file="", cwd=tmp_path) == Settings()


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [{"sniff_bytes": 16}, {"encoding": "no-such-codec"}, {"output_name": ""}, {"unknown": 1}],
)
def test_load_settings_rejects_invalid_values(tmp_path: Path, overrides: dict[str, object]) -> None:
    with pytest.raises(ConfigError):
        load_settings(overrides, env_file="", cwd=tmp_path)

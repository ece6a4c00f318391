from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from prepx import __version__, cli
from prepx.exceptions import NotAGitRepositoryError

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("prepx.settings.ENV_FILE", "")
    for name in ("PREPX_REPO", "PREPX_OUTPUT_NAME", "PREPX_SNIFF_BYTES", "PREPX_ENCODING", "PREPX_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
def test_parse_args_defaults() -> None:
    settings = cli.parse_args([])

    assert settings.repo is None
    assert settings.output_name == "llm_context.txt"
    assert settings.sniff_bytes == 1024
    assert settings.verbose is False


@pytest.mark.unit
def test_parse_args_options(tmp_path: Path) -> None:
    sniff_bytes = 4096
    settings = cli.parse_args(
        [
            "--repo",
            str(tmp_path),
            "--output-name",
            "ctx.txt",
            "--sniff-bytes",
            str(sniff_bytes),
            "--verbose",
        ],
    )

    assert settings.repo == tmp_path
    assert settings.output_name == "ctx.txt"
    assert settings.sniff_bytes == sniff_bytes
    assert settings.verbose is True


@pytest.mark.unit
def test_parse_args_reads_config_file(tmp_path: Path) -> None:
    cfg = tmp_path / "custom.yaml"
    cfg.write_text("output_name: from_yaml.txt\n", encoding="utf-8")

    settings = cli.parse_args(["--config", str(cfg)])

    assert settings.output_name == "from_yaml.txt"


@pytest.mark.unit
def test_parse_args_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.parse_args(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out


@pytest.mark.unit
def test_main_success(mocker: MockerFixture, capsys: pytest.CaptureFixture[str]) -> None:
    out_path = Path("/repo/llm_context.txt")
    process = mocker.patch.object(cli, "process", return_value=out_path)

    exit_code = cli.main([])

    assert exit_code == 0
    process.assert_called_once()
    assert capsys.readouterr().out == f"Successfully created LLM context file at: {out_path}\n"


@pytest.mark.unit
def test_main_reports_fatal_error(mocker: MockerFixture, capsys: pytest.CaptureFixture[str]) -> None:
    mocker.patch.object(cli, "process", side_effect=NotAGitRepositoryError(folder=Path("/tmp/x")))

    exit_code = cli.main([])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert f"Error: Not a Git repository: {Path('/tmp/x')}\n" in err


@pytest.mark.unit
def test_main_rejects_small_sniff_size(mocker: MockerFixture, capsys: pytest.CaptureFixture[str]) -> None:
    process = mocker.patch.object(cli, "process")

    exit_code = cli.main(["--sniff-bytes", "10"])

    assert exit_code == 1
    process.assert_not_called()
    assert "Error: Invalid configuration: " in capsys.readouterr().err

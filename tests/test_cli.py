import json

import pytest

from rolldown_analyzer.cli import main as cli_main
from rolldown_analyzer.config import AnalyzerConfig
from rolldown_analyzer.errors import ConfigurationError


def test_generate_data_writes_document(tmp_path, sample_events, write_inputs, capsys):
    logs_path, meta_path = write_inputs(sample_events)
    out_file = tmp_path / "out" / "nested" / "data.json"

    code = cli_main.main(["generate-data", "--logs", str(logs_path), "--meta", str(meta_path), "-o", str(out_file)])

    assert code == 0
    data = json.loads(out_file.read_text(encoding="utf-8"))
    assert set(data) == {"meta", "modules", "build_duration", "assets", "chunks", "packages",
                         "plugin_build_metrics"}
    assert data["build_duration"] == 100
    assert "Generated analysis data" in capsys.readouterr().out


def test_generate_copies_frontend(tmp_path, sample_events, write_inputs):
    logs_path, meta_path = write_inputs(sample_events)
    public_dir = tmp_path / "public"
    (public_dir / "assets").mkdir(parents=True)
    (public_dir / "index.html").write_text("<html></html>", encoding="utf-8")
    (public_dir / "assets" / "app.js").write_text("boot()", encoding="utf-8")
    out_dir = tmp_path / "site"

    code = cli_main.main(["generate", "--logs", str(logs_path), "--meta", str(meta_path),
                          "-o", str(out_dir), "--public-dir", str(public_dir)])

    assert code == 0
    assert (out_dir / "index.html").exists()
    assert (out_dir / "assets" / "app.js").read_text(encoding="utf-8") == "boot()"
    assert json.loads((out_dir / "rolldown-data.json").read_text(encoding="utf-8"))["build_duration"] == 100


def test_missing_metadata_exits_non_zero(tmp_path, sample_events, write_inputs, capsys):
    logs_path, _ = write_inputs(sample_events)

    code = cli_main.main(["generate-data", "--logs", str(logs_path), "--meta", str(tmp_path / "none.json"),
                          "-o", str(tmp_path / "data.json")])

    assert code == 1
    assert "metadata file not found" in capsys.readouterr().err
    assert not (tmp_path / "data.json").exists()


def test_unexpected_failure_exits_non_zero(tmp_path, sample_events, write_inputs, monkeypatch, capsys):
    logs_path, meta_path = write_inputs(sample_events)

    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_main, "generate_data", explode)
    code = cli_main.main(["generate-data", "--logs", str(logs_path), "--meta", str(meta_path),
                          "-o", str(tmp_path / "data.json")])

    assert code == 1
    assert "error: boom" in capsys.readouterr().err
    assert not (tmp_path / "data.json").exists()


def test_missing_required_arguments_exit_via_argparse():
    with pytest.raises(SystemExit) as excinfo:
        cli_main.main(["generate-data", "--logs", "logs.json"])
    assert excinfo.value.code == 2


def test_prepare_uses_environment(tmp_path, sample_events, write_inputs, monkeypatch):
    logs_path, meta_path = write_inputs(sample_events)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("LOGS_PATH", str(logs_path))
    monkeypatch.setenv("META_PATH", str(meta_path))

    assert cli_main.main(["prepare"]) == 0
    assert json.loads((workdir / "rolldown-data.json").read_text(encoding="utf-8"))["build_duration"] == 100


def test_prepare_keeps_existing_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOGS_PATH", raising=False)
    (tmp_path / "rolldown-data.json").write_text("{}", encoding="utf-8")

    assert cli_main.main(["prepare"]) == 0
    assert (tmp_path / "rolldown-data.json").read_text(encoding="utf-8") == "{}"


def test_prepare_requires_environment(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOGS_PATH", raising=False)
    monkeypatch.delenv("META_PATH", raising=False)

    assert cli_main.main(["prepare"]) == 1
    assert "LOGS_PATH and META_PATH are required" in capsys.readouterr().err


def test_config_from_env():
    config = AnalyzerConfig.from_env({"LOGS_PATH": "a.jsonl", "ROLLDOWN_ANALYZER_PUBLIC_DIR": "/srv/ui"})

    assert str(config.logs_path) == "a.jsonl"
    assert config.meta_path is None
    assert str(config.public_dir) == "/srv/ui"
    with pytest.raises(ConfigurationError):
        config.require_inputs()

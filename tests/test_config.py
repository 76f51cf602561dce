"""Tests for TOML config file loading."""

from __future__ import annotations

from pathlib import Path

from lpubmeta.cli import build_parser, load_config, main, resolve_options


def _model(tmp_path: Path) -> Path:
    doc = tmp_path / "model.ldr"
    doc.write_text("0 STEP\n")
    return doc


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[parse]\npop_on_step = false\n")
        result = load_config(cfg, tmp_path)
        assert result["parse"] == {"pop_on_step": False}

    def test_auto_discover_lpubmeta_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "lpubmeta.toml"
        cfg.write_text("[output]\ntrace = true\n")
        result = load_config(None, tmp_path)
        assert result["output"] == {"trace": True}


class TestConfigMerge:
    def test_defaults(self, tmp_path: Path) -> None:
        doc = _model(tmp_path)
        opts = resolve_options(build_parser().parse_args([str(doc)]))
        assert opts.input_file == doc
        assert opts.report_errors is True
        assert opts.range_errors_fail is True
        assert opts.pop_on_step is True
        assert opts.trace is False

    def test_config_values(self, tmp_path: Path) -> None:
        cfg = tmp_path / "lpubmeta.toml"
        cfg.write_text(
            "[parse]\nreport_errors = false\nrange_errors_fail = false\npop_on_step = false\n"
            "[output]\ntrace = true\n"
        )
        doc = _model(tmp_path)
        opts = resolve_options(build_parser().parse_args([str(doc)]))
        assert opts.report_errors is False
        assert opts.range_errors_fail is False
        assert opts.pop_on_step is False
        assert opts.trace is True

    def test_cli_overrides_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "lpubmeta.toml"
        cfg.write_text("[parse]\npop_on_step = false\n")
        doc = _model(tmp_path)
        opts = resolve_options(build_parser().parse_args([str(doc), "--pop"]))
        assert opts.pop_on_step is True

    def test_cli_disables_config_default(self, tmp_path: Path) -> None:
        doc = _model(tmp_path)
        opts = resolve_options(build_parser().parse_args([str(doc), "--no-pop", "--no-report"]))
        assert opts.pop_on_step is False
        assert opts.report_errors is False

    def test_non_bool_ignored(self, tmp_path: Path) -> None:
        cfg = tmp_path / "lpubmeta.toml"
        cfg.write_text('[parse]\npop_on_step = "no"\n[output]\ntrace = 1\n')
        doc = _model(tmp_path)
        opts = resolve_options(build_parser().parse_args([str(doc)]))
        assert opts.pop_on_step is True
        assert opts.trace is False

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        cfg = tmp_path / "alt.toml"
        cfg.write_text("[output]\ntrace = true\n")
        doc = _model(tmp_path)
        opts = resolve_options(build_parser().parse_args([str(doc), "--config", str(cfg)]))
        assert opts.trace is True


class TestConfigErrors:
    def test_invalid_toml(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "lpubmeta.toml").write_text("[parse\n")
        doc = _model(tmp_path)
        assert main([str(doc)]) == 2
        assert "invalid config file" in capsys.readouterr().err

    def test_missing_explicit_config(self, tmp_path: Path, capsys) -> None:
        doc = _model(tmp_path)
        assert main([str(doc), "--config", str(tmp_path / "nope.toml")]) == 2
        assert "config file not found" in capsys.readouterr().err

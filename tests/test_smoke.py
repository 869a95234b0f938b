"""Very small smoke test to ensure package imports and CLI wiring."""

from __future__ import annotations

import importlib

from click.testing import CliRunner


def test_import() -> None:
    mod = importlib.import_module("texture_ripper")
    assert hasattr(mod, "__version__")


def test_cli_help() -> None:
    from texture_ripper.cli import main

    result = CliRunner().invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "--offscreen" in result.output


def test_cli_rejects_missing_image(tmp_path) -> None:
    from texture_ripper.cli import main

    result = CliRunner().invoke(main, [str(tmp_path / "missing.png"), "--offscreen"])

    assert result.exit_code == 2

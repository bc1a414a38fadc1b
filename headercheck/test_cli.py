from pathlib import Path
import asyncio
import importlib.util

import pytest

SCRIPT = Path(__file__).resolve().parent.parent / "headercheck.py"

CONFIG = '''
template = """
Copyright (c) {year} {org}.
Author: {author}
"""
year = 2019

[variables]
org = "Org"
'''


@pytest.fixture(scope="module")
def cli():
    # The root script shares its name with the package, so load it by path.
    spec = importlib.util.spec_from_file_location("headercheck_cli", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def project(tmp_path) -> Path:
    (tmp_path / "headercheck.toml").write_text(CONFIG)
    (tmp_path / "main.cc").write_text("int x;\n")
    return tmp_path


def test_config_before_command(cli, project):
    args = ["--config", str(project / "headercheck.toml"), "-q", "lint", str(project / "main.cc")]
    assert asyncio.run(cli.main(args)) == 1


def test_compliant_file_lints_clean(cli, project):
    (project / "main.cc").write_text("// Copyright (c) 2019 Org.\n// Author: elbaro\n\nint x;\n")
    args = ["-c", str(project / "headercheck.toml"), "-j", "2", "lint", str(project / "main.cc")]
    assert asyncio.run(cli.main(args)) == 0


def test_bad_config_exits_with_2(cli, project):
    (project / "headercheck.toml").write_text("template = 3\n")
    args = ["-q", "--config", str(project / "headercheck.toml"), "format", str(project / "main.cc")]
    assert asyncio.run(cli.main(args)) == 2
    assert (project / "main.cc").read_text() == "int x;\n"


@pytest.mark.parametrize("workers", ["0", "-1", "many"])
def test_workers_must_be_a_positive_number(cli, project, workers):
    with pytest.raises(SystemExit) as e:
        asyncio.run(cli.main(["-j", workers, "lint", str(project / "main.cc")]))
    assert e.value.code == 2


def test_no_command_prints_help(cli, capsys):
    assert asyncio.run(cli.main([])) == 2
    assert "lint" in capsys.readouterr().out


def test_positive_int(cli):
    assert cli.positive_int("3") == 3
    with pytest.raises(ValueError):
        cli.positive_int("x")

from __future__ import annotations

import importlib.util
from pathlib import Path
import shutil
from types import ModuleType

import pytest


REPO_ROOT = Path(__file__).resolve().parents[2]
SCRIPT_PATH = REPO_ROOT / "scripts" / "check_release_consistency.py"


def _load_release_module() -> ModuleType:
    spec = importlib.util.spec_from_file_location("check_release_consistency_module", SCRIPT_PATH)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _copy_release_files(target: Path) -> None:
    for relative in ("backend/standup/version.py", "backend/standup/main.py", "pyproject.toml"):
        destination = target / relative
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(REPO_ROOT / relative, destination)


def test_repository_is_release_consistent() -> None:
    module = _load_release_module()

    assert module.check(REPO_ROOT) == []


def test_version_mismatch_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    module = _load_release_module()
    _copy_release_files(tmp_path)
    (tmp_path / "backend/standup/version.py").write_text('APP_VERSION = "9.9.9"\n', encoding="utf-8")

    errors = module.check(tmp_path)

    assert any("does not match APP_VERSION 9.9.9" in error for error in errors)
    assert module.main([str(tmp_path)]) == 1
    assert "[ERROR]" in capsys.readouterr().out


def test_missing_files_are_reported(tmp_path: Path) -> None:
    module = _load_release_module()

    errors = module.check(tmp_path)

    assert len(errors) == 3
    assert all(error.startswith("Missing required file") for error in errors)


def test_non_semver_version_is_reported(tmp_path: Path) -> None:
    module = _load_release_module()
    _copy_release_files(tmp_path)
    (tmp_path / "backend/standup/version.py").write_text('APP_VERSION = "1.0"\n', encoding="utf-8")

    errors = module.check(tmp_path)

    assert any("semantic versioning" in error for error in errors)


def test_main_reports_success(capsys: pytest.CaptureFixture[str]) -> None:
    module = _load_release_module()

    assert module.main([str(REPO_ROOT)]) == 0
    assert "[OK] Release consistency checks passed" in capsys.readouterr().out


def test_project_version_is_read_from_project_table_only(tmp_path: Path) -> None:
    module = _load_release_module()
    _copy_release_files(tmp_path)
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(
        '[tool.other]\nversion = "0.1.0"\n\n[project]\nname = "yti-standup"\nversion = "2.0.0"\n',
        encoding="utf-8",
    )

    errors = module.check(tmp_path)

    assert any("pyproject.toml version 2.0.0" in error for error in errors)


def test_malformed_pyproject_is_reported(tmp_path: Path) -> None:
    module = _load_release_module()
    _copy_release_files(tmp_path)
    (tmp_path / "pyproject.toml").write_text("[project\nversion = ", encoding="utf-8")

    errors = module.check(tmp_path)

    assert "pyproject.toml must declare a static [project] version." in errors

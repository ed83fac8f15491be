#!/usr/bin/env python3
"""Validate that the runtime version, the FastAPI wiring and pyproject.toml agree."""

from __future__ import annotations

import re
import sys
import tomllib
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
VERSION_FILE = REPO_ROOT / "backend" / "standup" / "version.py"
MAIN_FILE = REPO_ROOT / "backend" / "standup" / "main.py"
PYPROJECT_FILE = REPO_ROOT / "pyproject.toml"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _parse_app_version(version_text: str) -> str | None:
    match = re.search(r'^APP_VERSION\s*=\s*"([^"]+)"\s*$', version_text, flags=re.MULTILINE)
    if not match:
        return None
    return match.group(1).strip()


def _parse_project_version(pyproject_text: str) -> str | None:
    try:
        project = tomllib.loads(pyproject_text).get("project", {})
    except tomllib.TOMLDecodeError:
        return None
    version = project.get("version") if isinstance(project, dict) else None
    return version.strip() if isinstance(version, str) else None


def _validate_semver(version: str) -> bool:
    return re.fullmatch(r"\d+\.\d+\.\d+", version) is not None


def check(repo_root: Path = REPO_ROOT) -> list[str]:
    version_file = repo_root / VERSION_FILE.relative_to(REPO_ROOT)
    main_file = repo_root / MAIN_FILE.relative_to(REPO_ROOT)
    pyproject_file = repo_root / PYPROJECT_FILE.relative_to(REPO_ROOT)

    errors = [f"Missing required file: {path}" for path in (version_file, main_file, pyproject_file) if not path.exists()]
    if errors:
        return errors

    app_version = _parse_app_version(_read(version_file))
    if app_version is None:
        errors.append(f"Could not parse APP_VERSION from {version_file}")
    elif not _validate_semver(app_version):
        errors.append(f"APP_VERSION must follow X.Y.Z semantic versioning, found: {app_version}")

    main_text = _read(main_file)
    if "from standup.version import APP_VERSION" not in main_text:
        errors.append("backend/standup/main.py must import APP_VERSION from standup.version.")
    if re.search(r"FastAPI\([^)]*version\s*=\s*APP_VERSION", main_text, flags=re.DOTALL) is None:
        errors.append("backend/standup/main.py must set FastAPI version=APP_VERSION.")

    project_version = _parse_project_version(_read(pyproject_file))
    if project_version is None:
        errors.append("pyproject.toml must declare a static [project] version.")
    elif app_version is not None and project_version != app_version:
        errors.append(f"pyproject.toml version {project_version} does not match APP_VERSION {app_version}.")

    return errors


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    repo_root = Path(args[0]).resolve() if args else REPO_ROOT
    errors = check(repo_root)
    if errors:
        for error in errors:
            print(f"[ERROR] {error}")
        return 1

    version = _parse_app_version(_read(repo_root / VERSION_FILE.relative_to(REPO_ROOT)))
    print(f"[OK] Release consistency checks passed for v{version}.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

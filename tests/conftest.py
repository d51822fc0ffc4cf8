"""
Pytest configuration and fixtures for test isolation.
"""
import json
import os
from pathlib import Path

import pytest

from bundler.config.environment import EnvironmentVariables


@pytest.fixture(autouse=True)
def isolate_tests(monkeypatch):
    """
    Automatically isolate each test by removing bundler environment
    variables that would otherwise override configuration files.
    """
    for name in EnvironmentVariables.get_all_variables():
        monkeypatch.delenv(name, raising=False)
    
    yield


@pytest.fixture(autouse=True, scope="function")
def reset_environment():
    """Reset environment variables between tests."""
    original_env = os.environ.copy()
    yield
    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


def _write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _write_package_json(pkg_dir: Path, name: str, version: str, dependencies=None) -> Path:
    data = {"name": name, "version": version}
    if dependencies:
        data["dependencies"] = dependencies
    return _write_file(pkg_dir / "package.json", json.dumps(data))


@pytest.fixture
def write_file():
    """Write a UTF-8 text file, creating parent directories."""
    return _write_file


@pytest.fixture
def write_package_json():
    """Write a minimal package.json."""
    return _write_package_json


@pytest.fixture
def project_dir(tmp_path):
    """A minimal npm project with one source file and one dependency."""
    root = tmp_path / "project"
    _write_package_json(root, "my-app", "1.0.0", {"dep-a": "^2.0.0"})
    _write_file(root / "src" / "index.js", "hello")
    _write_file(root / "src" / "data.json", '{"a": 1}')
    _write_file(root / "README.md", "readme")
    
    dep_dir = root / "node_modules" / "dep-a"
    _write_package_json(dep_dir, "dep-a", "2.0.0")
    _write_file(dep_dir / "lib" / "main.js", "dep")
    return root

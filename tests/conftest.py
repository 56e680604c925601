"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
from click.testing import CliRunner
from ruamel.yaml import YAML

from json2yaml.cli import cli
from json2yaml.context import BUFFER_SIZE_ENV, CHUNK_SIZE_ENV


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep settings from the developer's shell out of the tests."""
    monkeypatch.delenv(CHUNK_SIZE_ENV, raising=False)
    monkeypatch.delenv(BUFFER_SIZE_ENV, raising=False)


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args and optional stdin.

    Usage:
        result = invoke(["data.json"])
        result = invoke([], input_data='{"a": 1}')
    """

    def _invoke(args, input_data=None):
        return cli_runner.invoke(cli, args, input=input_data)

    return _invoke


@pytest.fixture
def test_data():
    """Provide path to test data directory."""
    return Path(__file__).parent / "data"


@pytest.fixture
def people_json(test_data):
    """Two concatenated JSON objects."""
    return test_data / "people.json"


@pytest.fixture
def load_yaml():
    """Parse YAML text into a list of documents with a safe loader."""

    def _load(text):
        return list(YAML(typ="safe", pure=True).load_all(text))

    return _load

"""Unit tests configuration file."""

import os

import pytest

from iupgen.generator import load_file

FILE_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), "generator")


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def catalog():
    return load_file(f"{FILE_DIR}/elements.json")


@pytest.fixture
def element(catalog):
    def find(name):
        return next(d for d in catalog.classes if d.name == name)

    return find

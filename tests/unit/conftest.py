"""Mark everything collected under tests/unit as ``unit``."""

from pathlib import Path

import pytest


UNIT_ROOT = Path(__file__).resolve().parent


def pytest_collection_modifyitems(config, items):
    for item in items:
        if UNIT_ROOT in Path(item.path).resolve().parents:
            item.add_marker(pytest.mark.unit)

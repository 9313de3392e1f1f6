import os

import pytest

from control.config import load_all_configs


REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


@pytest.fixture
def repo_root():
    return REPO_ROOT


@pytest.fixture
def configs():
    return load_all_configs(REPO_ROOT)

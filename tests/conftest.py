"""Shared test fixtures."""

import shutil
import tempfile

import pytest

from KTXPack import WriteOptions
from KTXPack.config import PackConfig

from ktx2_helpers import make_rgba8_container


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def default_config():
    return PackConfig()


@pytest.fixture
def write_options():
    return WriteOptions()


@pytest.fixture
def rgba8_container():
    return make_rgba8_container()

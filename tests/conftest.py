"""Common test fixtures for vcdscout tests."""

import pytest
from vcdscout import Parser
from .test_utils import get_test_input_path, TestFiles


@pytest.fixture
def wikipedia_vcd():
    """Path to the sample VCD from the Wikipedia article."""
    return get_test_input_path(TestFiles.WIKIPEDIA_VCD)


@pytest.fixture
def nested_vcd():
    """Path to a VCD with nested scopes and every value change kind."""
    return get_test_input_path(TestFiles.NESTED_SCOPES_VCD)


@pytest.fixture
def wikipedia_bytes(wikipedia_vcd):
    return wikipedia_vcd.read_bytes()


@pytest.fixture
def nested_parser(nested_vcd):
    """Parser over nested_scopes.vcd; the file is closed after the test."""
    with open(nested_vcd, "rb") as f:
        yield Parser(f)

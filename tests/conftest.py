"""Shared test fixtures for rcl-parser.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

SAMPLE_CONFIG = """\
// Hosts to deploy to.
let hosts = ["alpha", "beta"];

let port-base = 8000;

{
  // One entry per host.
  servers = [
    for i, host in hosts:
    if host != "beta":
    { name = host, port = port-base + i },
  ],
  replicas: 0x10,
  mask = 0b1010_0101,
  ratio = 1.5e-3,
  enabled = not disabled.value,
}
"""


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "rcl"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def sample_config() -> str:
    """A realistic RCL document exercising most of the grammar."""
    return SAMPLE_CONFIG

"""Integration test fixtures.

Subprocess tests get a sanitised environment; in-process tests get a fully
wired MCP client session over memory streams, with GitHub mocked by respx.
"""

from __future__ import annotations

import os

import pytest


@pytest.fixture()
def subprocess_env() -> dict[str, str]:
    """Environment for ``python -m tidycontext.server`` with no inherited config."""
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith("TIDYCONTEXT__") and key != "GITHUB_TOKEN"
    }
    env["TIDYCONTEXT__LOGGING__FORMAT"] = "text"
    return env

"""Suite markers for the bridge tests.

``unit_tests`` drive the bridge through scripted runners and never spawn a
process; ``integration_tests`` spawn real child processes (a stand-in
converter script, ``sh``); ``e2e_tests`` run the installed
``gpsbabel-bridge`` command.
"""

from __future__ import annotations

from pathlib import Path

import pytest

_SUITE_MARKERS = {
    "e2e_tests": pytest.mark.e2e,
    "integration_tests": pytest.mark.integration,
    "unit_tests": pytest.mark.unit,
}


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each test with the suite of the directory it lives in."""
    del config
    for item in items:
        suites = Path(str(item.path)).parts
        for directory, marker in _SUITE_MARKERS.items():
            if directory in suites:
                item.add_marker(marker)
                break

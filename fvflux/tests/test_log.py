"""
Pytest tests for the logging setup used by the scripts.
"""

import pytest
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from fvflux.src import GasProperties, Mesh2D, FluxSolver, select_flux_scheme, setup_logging


@pytest.fixture
def lines():
    """Formatted records; the default stderr handler is restored afterwards."""
    collected = []
    yield collected
    logger.remove()
    logger.add(sys.stderr)


class TestSetupLogging:

    def test_format_names_module(self, lines):
        setup_logging("WARNING", show_time=False, sink=lines.append)

        select_flux_scheme('central', GasProperties())

        assert len(lines) == 1
        assert lines[0].startswith("WARNING  | flux - central flux")

    def test_level_threshold(self, lines):
        setup_logging("INFO", show_time=False, sink=lines.append)

        FluxSolver(Mesh2D.rectangle(2, 2), GasProperties())  # debug records only

        assert lines == []

    def test_debug_level_shows_construction(self, lines):
        setup_logging("DEBUG", show_time=False, sink=lines.append)

        FluxSolver(Mesh2D.rectangle(2, 2), GasProperties())

        assert any("| solver - FluxSolver" in line for line in lines)

    def test_elapsed_time_prefix(self, lines):
        setup_logging("WARNING", show_time=True, sink=lines.append)

        select_flux_scheme('ausmdv', GasProperties())

        assert len(lines) == 1
        assert " | WARNING  | flux - " in lines[0]

    def test_package_only_filter(self, lines):
        setup_logging("WARNING", show_time=False, sink=lines.append, package_only=True)

        logger.patch(lambda record: record.update(name="numpy.core")).warning("outside")
        select_flux_scheme('central', GasProperties())

        assert len(lines) == 1
        assert "central flux" in lines[0]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

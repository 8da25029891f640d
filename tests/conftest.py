"""
Pytest configuration and common fixtures for the test suite.
"""

import pytest
from pathlib import Path
import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

RESULTS_HEADER = "timestamp,instance,algorithm,seed,time_limit,objective,time,history"


# Two algorithms, one instance, two seeds:
# A reports 10 and 10, B reports 10 and 5.
TWO_ALGORITHM_ROWS = [
    "t0,I1,A,1,60,10,1.0",
    "t0,I1,A,2,60,10,2.0",
    "t0,I1,B,1,60,10,3.0",
    "t0,I1,B,2,60,5,1.0",
]


# Three algorithms, three instances, two seeds. C dominates everywhere.
THREE_ALGORITHM_ROWS = [
    "t0,I1,A,1,60,4,1.0",
    "t0,I1,A,2,60,3,1.0",
    "t0,I1,B,1,60,2,1.0",
    "t0,I1,B,2,60,4,1.0",
    "t0,I1,C,1,60,5,1.0",
    "t0,I1,C,2,60,5,1.0",
    "t0,I2,A,1,60,7,1.0",
    "t0,I2,A,2,60,7,1.0",
    "t0,I2,B,1,60,6,1.0",
    "t0,I2,B,2,60,7,1.0",
    "t0,I2,C,1,60,8,1.0",
    "t0,I2,C,2,60,8,1.0",
    "t0,I3,A,1,60,1,1.0",
    "t0,I3,A,2,60,1,1.0",
    "t0,I3,B,1,60,1,1.0",
    "t0,I3,B,2,60,1,1.0",
    "t0,I3,C,1,60,2,1.0",
    "t0,I3,C,2,60,2,1.0",
]


@pytest.fixture
def write_file(tmp_path):
    """Fixture returning a helper that writes a text file under tmp_path."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path
    return _write


@pytest.fixture
def make_results(write_file):
    """Fixture returning a helper that writes a results file from data rows."""
    def _make(rows, name: str = "results.csv") -> Path:
        return write_file(name, RESULTS_HEADER + "\n" + "".join(f"{row}\n" for row in rows))
    return _make


@pytest.fixture
def make_parameters(write_file, tmp_path):
    """Fixture returning a helper that writes a parameter file."""
    def _make(results: Path, instances=None, algorithms=None, output: str = "table.csv") -> Path:
        tokens = [str(results)]
        if instances is None:
            tokens.append("all_instances")
        else:
            tokens += ["some_instances", str(write_file("instances.txt", "\n".join(instances) + "\n"))]
        if algorithms is None:
            tokens.append("all_algorithms")
        else:
            tokens += ["some_algorithms", str(write_file("algorithms.txt", "\n".join(algorithms) + "\n"))]
        tokens.append(str(tmp_path / output))
        return write_file("params.txt", "\n".join(tokens) + "\n")
    return _make


@pytest.fixture
def two_algorithm_results(make_results):
    """Results file of the two-algorithm scenario."""
    return make_results(TWO_ALGORITHM_ROWS)


@pytest.fixture
def three_algorithm_results(make_results):
    """Results file of the three-algorithm scenario."""
    return make_results(THREE_ALGORITHM_ROWS)


@pytest.fixture
def display_names_file(write_file):
    """Display names for algorithms A, B and C."""
    return write_file("Alg_names.csv", "A,Alpha\nB,Beta\nC,Gamma\n")


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")

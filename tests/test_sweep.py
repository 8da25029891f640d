"""
Tests for the time-limit scaling sweep.
"""

import pytest

from benchtable.config import read_parameter_file
from benchtable.exceptions import ConfigurationError
from benchtable.sweep import scaling_sweep, write_sweep_files

# A improves from 5 to 9 at time 10; B reaches its final 7 at time 2.
SWEEP_ROWS = [
    "t0,I1,A,1,10,9,10.0,5:1.0;9:10.0",
    "t0,I1,B,1,10,7,2.0,7:2.0",
]


@pytest.fixture
def sweep_parameters(make_results, make_parameters):
    return read_parameter_file(make_parameters(make_results(SWEEP_ROWS)))


class TestScalingSweep:
    """Test metric collection over increasing scalings."""

    def test_first_equal_changes_with_time_budget(self, sweep_parameters):
        sweep = scaling_sweep(sweep_parameters, steps=2, metric="FE")
        assert list(sweep.index) == [1, 2]
        assert list(sweep["scaling"]) == [0.5, 1.0]
        assert sweep.loc[1, "A"] == 0.0
        assert sweep.loc[1, "B"] == 100.0
        assert sweep.loc[2, "A"] == 100.0
        assert sweep.loc[2, "B"] == 0.0

    def test_display_names_as_columns(self, sweep_parameters):
        sweep = scaling_sweep(sweep_parameters, steps=1, metric="bd", display_names={"A": "Alg A", "B": "Alg B"})
        assert set(sweep.columns) == {"scaling", "Alg A", "Alg B"}
        assert sweep.loc[1, "Alg A"] == pytest.approx(0.0)
        assert sweep.loc[1, "Alg B"] == pytest.approx(100 * (1 - 7 / 9))

    def test_invalid_metric(self, sweep_parameters):
        with pytest.raises(ConfigurationError, match="Unknown metric"):
            scaling_sweep(sweep_parameters, steps=2, metric="XY")

    def test_invalid_steps(self, sweep_parameters):
        with pytest.raises(ConfigurationError):
            scaling_sweep(sweep_parameters, steps=0)


class TestWriteSweepFiles:
    """Test the per-algorithm data files."""

    def test_one_file_per_algorithm(self, sweep_parameters, tmp_path):
        sweep = scaling_sweep(sweep_parameters, steps=2, metric="FE")
        written = write_sweep_files(sweep, tmp_path / "plots", metric="FE")
        assert sorted(p.name for p in written) == ["A.dat", "B.dat"]
        assert (tmp_path / "plots" / "A.dat").read_text() == "1 0.0\n2 100.0\n"
        assert (tmp_path / "plots" / "B.dat").read_text() == "1 100.0\n2 0.0\n"

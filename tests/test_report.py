"""
Tests for the ranking table and the extraction queries.
"""

import io
from types import SimpleNamespace

import numpy as np
import pytest

from benchtable.exceptions import ConfigurationError, DisplayNameError, UnknownAlgorithmError
from benchtable.loader import load_results
from benchtable.report import (
    ExtractionResult,
    extract_champion_instances,
    extract_difficult_instances,
    metrics_frame,
    ranking_order,
    read_display_names,
    read_display_names_file,
    write_table,
)
from benchtable.statistics import ChampionMetric, compute_statistics

HEADER = "timestamp,instance,algorithm,seed,time_limit,objective,time\n"


def load_text(text):
    return load_results(io.StringIO(HEADER + text))


@pytest.fixture
def two_algorithms(two_algorithm_results):
    with open(two_algorithm_results) as f:
        table = load_results(f)
    return table, compute_statistics(table)


@pytest.fixture
def three_algorithms(three_algorithm_results):
    with open(three_algorithm_results) as f:
        table = load_results(f)
    return table, compute_statistics(table)


class TestRankingOrder:
    """Test the table row order."""

    def test_first_equal_descending(self):
        stats = SimpleNamespace(n_algorithms=3, fe=np.array([0.2, 0.9, 0.5]), md=np.zeros(3))
        assert ranking_order(stats) == [1, 2, 0]

    def test_ties_broken_by_mean_deviation_then_index(self):
        stats = SimpleNamespace(
            n_algorithms=4,
            fe=np.array([0.5, 0.5, 0.5, 0.5]),
            md=np.array([0.1, 0.3, 0.1, 0.2]),
        )
        assert ranking_order(stats) == [1, 3, 0, 2]

    def test_three_algorithm_order(self, three_algorithms):
        table, stats = three_algorithms
        names = [table.algorithms.name(h) for h in ranking_order(stats)]
        assert names == ["C", "B", "A"]


class TestDisplayNames:
    """Test the display-name lookup file."""

    def test_read(self):
        names = read_display_names(io.StringIO("A,Alpha\nB,Beta one,two\r\n"))
        assert names == {"A": "Alpha", "B": "Beta one,two"}

    def test_line_without_comma(self):
        with pytest.raises(DisplayNameError, match=r"Error at line 2\) B Beta"):
            read_display_names(io.StringIO("A,Alpha\nB Beta\n"))

    def test_duplicate_name(self):
        with pytest.raises(DisplayNameError, match="line 2"):
            read_display_names(io.StringIO("A,Alpha\nA,Again\n"))

    def test_read_file(self, display_names_file):
        assert read_display_names_file(display_names_file)["C"] == "Gamma"


class TestWriteTable:
    """Test the CSV ranking table."""

    def test_percentages(self, two_algorithms):
        table, stats = two_algorithms
        out = io.StringIO()
        write_table(stats, table, out)
        assert out.getvalue().splitlines() == [
            "Heuristic,FE,FS,BA,EBA,WD,MD,BD,AR",
            "A,100.0,100.0,100.0,100.0,0.00,0.00,0.00,1.0",
            "B,0.0,0.0,100.0,0.0,50.00,25.00,0.00,1.5",
        ]

    def test_absolute_counts(self, two_algorithm_results):
        with open(two_algorithm_results) as f:
            table = load_results(f)
        stats = compute_statistics(table, absolute_values=True)
        out = io.StringIO()
        write_table(stats, table, out)
        lines = out.getvalue().splitlines()
        assert lines[1] == "A,1,1,1,1,0.00,0.00,0.00,1.0"
        assert lines[2] == "B,0,0,1,0,50.00,25.00,0.00,1.5"

    def test_display_names(self, three_algorithms, display_names_file, tmp_path):
        table, stats = three_algorithms
        output = tmp_path / "table.csv"
        formatted = write_table(stats, table, output, read_display_names_file(display_names_file))
        assert list(formatted["Heuristic"]) == ["Gamma", "Beta", "Alpha"]
        assert output.read_text().splitlines()[1].startswith("Gamma,100.0,100.0,100.0,100.0")

    def test_missing_display_name(self, two_algorithms):
        table, stats = two_algorithms
        with pytest.raises(DisplayNameError, match="Algorithm B"):
            write_table(stats, table, io.StringIO(), {"A": "Alpha"})

    def test_metrics_frame_is_numeric(self, two_algorithms):
        table, stats = two_algorithms
        frame = metrics_frame(stats, table)
        assert list(frame["Heuristic"]) == ["A", "B"]
        assert frame.loc[1, "WD"] == pytest.approx(50.0)
        assert frame.loc[1, "AR"] == pytest.approx(1.5)


class TestDifficultInstances:
    """Test extraction of instances few algorithms solve."""

    ROWS = (
        # I1: best 5 found by A and B on every seed
        "t,I1,A,1,60,5,1.0\nt,I1,A,2,60,5,1.0\n"
        "t,I1,B,1,60,5,1.0\nt,I1,B,2,60,5.0,1.0\n"
        "t,I1,C,1,60,5,1.0\nt,I1,C,2,60,4,1.0\n"
        # I2: best 9 found by C only
        "t,I2,A,1,60,8,1.0\nt,I2,A,2,60,8,1.0\n"
        "t,I2,B,1,60,7,1.0\nt,I2,B,2,60,8,1.0\n"
        "t,I2,C,1,60,9,1.0\nt,I2,C,2,60,9,1.0\n"
        # I3: everybody finds 3
        "t,I3,A,1,60,3,1.0\nt,I3,A,2,60,3,1.0\n"
        "t,I3,B,1,60,3,1.0\nt,I3,B,2,60,3,1.0\n"
        "t,I3,C,1,60,3,1.0\nt,I3,C,2,60,3,1.0\n"
    )

    def test_default_level_is_half_the_algorithms(self):
        result = extract_difficult_instances(load_text(self.ROWS))
        assert result.accepted == ["I2"]
        assert result.rejected == 2

    def test_explicit_level(self):
        result = extract_difficult_instances(load_text(self.ROWS), level=2)
        assert result.accepted == ["I1", "I2"]
        assert result.rejected == 1

    def test_level_zero(self):
        result = extract_difficult_instances(load_text(self.ROWS), level=0)
        assert result.accepted == []
        assert result.rejected == 3

    def test_negative_best_is_never_reached(self):
        table = load_text("t,I1,A,1,60,-2,1.0\nt,I1,B,1,60,-3,1.0\n")
        result = extract_difficult_instances(table, level=0)
        assert result.accepted == ["I1"]

    def test_write(self, tmp_path):
        result = ExtractionResult(accepted=["I2", "I7"], rejected=1)
        path = tmp_path / "difficult.txt"
        result.write(path)
        assert path.read_text() == "I2\nI7\n"
        assert result.accepted_count == 2


class TestChampionInstances:
    """Test extraction of the instances where an algorithm wins."""

    def test_first_equal(self, two_algorithms):
        table, stats = two_algorithms
        assert extract_champion_instances(stats, table, "A").accepted == ["I1"]
        result = extract_champion_instances(stats, table, "B")
        assert result.accepted == []
        assert result.rejected == 1

    def test_best_achieved(self, two_algorithms):
        table, stats = two_algorithms
        result = extract_champion_instances(stats, table, "B", ChampionMetric.BA)
        assert result.accepted == ["I1"]
        result = extract_champion_instances(stats, table, "B", 3)
        assert result.accepted == []

    def test_unknown_algorithm(self, two_algorithms):
        table, stats = two_algorithms
        with pytest.raises(UnknownAlgorithmError, match="Algorithm Z does not exist!"):
            extract_champion_instances(stats, table, "Z")

    def test_invalid_metric(self, two_algorithms):
        table, stats = two_algorithms
        with pytest.raises(ConfigurationError):
            extract_champion_instances(stats, table, "A", 7)

    def test_written_to_stream(self, three_algorithms):
        table, stats = three_algorithms
        out = io.StringIO()
        extract_champion_instances(stats, table, "C", ChampionMetric.FS).write(out)
        assert out.getvalue() == "I1\nI2\nI3\n"

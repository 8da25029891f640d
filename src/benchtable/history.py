"""
Extraction of the objective value reached within a time limit.

A result record may embed the run's improvement history as a single field of
``value:time`` tokens separated by semicolons, in chronological order::

    5:1.0;7:2.0;9:5.0;

The last token is the terminal one: it carries the final value of the run,
which the record already reports in its objective and time columns.
"""

from typing import NamedTuple

from .exceptions import DecimalFormatError

TOKEN_DELIMITER = ";"
VALUE_SEPARATOR = ":"


class HistoryPoint(NamedTuple):
    """Value and time strings selected from a history."""
    value: str
    time: str

    @property
    def is_terminal(self) -> bool:
        """True when the limit reaches the end of the run (empty value)."""
        return self.value == ""


NO_RESULT = HistoryPoint("0", "0")


def parse_history(history: str):
    """
    Split a history string into ``(value, time)`` string pairs.

    Trailing delimiters, blanks and carriage returns are ignored.
    """
    body = history.strip().rstrip(TOKEN_DELIMITER).strip()
    if not body:
        return []
    points = []
    for token in body.split(TOKEN_DELIMITER):
        value, _, time = token.strip().partition(VALUE_SEPARATOR)
        points.append((value, time))
    return points


def value_at_time_limit(history: str, limit: float) -> HistoryPoint:
    """
    Return the last value recorded at or before ``limit``.

    Tokens are scanned from the end of the history. The first one whose time
    does not exceed the limit is the answer, except for the terminal token:
    when the limit reaches it the run completed within the budget and an
    empty value is returned, telling the caller to keep the record's own
    objective and time.

    Args:
        history: Semicolon-separated ``value:time`` tokens.
        limit: Time limit, already scaled.

    Returns:
        The selected ``HistoryPoint``; ``HistoryPoint("", time)`` for the
        terminal token, or ``NO_RESULT`` (``("0", "0")``) when no token lies
        within the limit.

    Raises:
        DecimalFormatError: If a token time is not a number.
    """
    points = parse_history(history)
    last = len(points) - 1
    for position in range(last, -1, -1):
        value, time = points[position]
        try:
            reached = float(time) <= limit
        except ValueError:
            raise DecimalFormatError(f"Invalid time {time!r} in history token {value}:{time}")
        if reached:
            if position == last:
                return HistoryPoint("", time)
            return HistoryPoint(value, time)
    return NO_RESULT

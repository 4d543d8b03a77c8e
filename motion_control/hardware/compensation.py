"""Joint compensation table reader.

A compensation file lists one point per line as three numbers::

    # nominal  a        b
    0.000      0.002    -0.001
    100.000    100.004  99.998

For ``file_type == 0`` the second and third columns are the absolute
positions reached when moving forward and in reverse; they are stored as
trims relative to the nominal position.  Any other type means the
columns already are forward / reverse trims.

Blank lines and lines starting with ``#`` are skipped.  Nominal
positions must strictly increase.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_COMP_POINTS = 256


class CompFileError(Exception):
    """Raised when a compensation file cannot be read or is malformed."""

    pass


@dataclass(frozen=True)
class CompPoint:
    """One compensation point (trims relative to ``nominal``)."""

    nominal: float
    forward_trim: float
    reverse_trim: float


@dataclass(frozen=True)
class CompTable:
    """Compensation table for one joint."""

    path: Path
    file_type: int
    points: tuple[CompPoint, ...]

    def __len__(self) -> int:
        return len(self.points)


def _parse_line(path: Path, lineno: int, line: str) -> tuple[float, float, float]:
    fields = line.split()
    if len(fields) != 3:
        raise CompFileError(
            f"{path}:{lineno}: expected 3 values, got {len(fields)}"
        )
    try:
        nominal, a, b = (float(f) for f in fields)
    except ValueError as exc:
        raise CompFileError(f"{path}:{lineno}: {exc}") from exc
    return nominal, a, b


def load_comp_table(path: str | Path, file_type: int = 0) -> CompTable:
    """Read and validate a compensation file.

    Parameters
    ----------
    path : str | Path
        Compensation file.
    file_type : int
        ``0`` for nominal / forward / reverse positions, anything else
        for nominal / forward trim / reverse trim.

    Raises
    ------
    CompFileError
        If the file is missing, a line is malformed, nominal positions
        do not strictly increase, or there are more than
        ``MAX_COMP_POINTS`` points.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CompFileError(f"Cannot read compensation file {path}: {exc}") from exc

    points: list[CompPoint] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        nominal, a, b = _parse_line(path, lineno, line)
        if file_type == 0:
            a, b = a - nominal, b - nominal

        if points and nominal <= points[-1].nominal:
            raise CompFileError(
                f"{path}:{lineno}: nominal {nominal} does not increase "
                f"(previous {points[-1].nominal})"
            )
        if len(points) == MAX_COMP_POINTS:
            raise CompFileError(
                f"{path}: more than {MAX_COMP_POINTS} compensation points"
            )
        points.append(CompPoint(nominal, a, b))

    logger.debug("Read %d compensation point(s) from %s", len(points), path)
    return CompTable(path=path, file_type=file_type, points=tuple(points))

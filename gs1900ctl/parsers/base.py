"""Building blocks shared by the output parsers.

The GS1900 CLI prints three kinds of output:

* ``key : value`` listings (``show info``),
* pipe-delimited tables (``show vlan``, ``show lldp neighbor``, ...) whose
  header may span several rows and whose cells may wrap onto a continuation
  row with an empty key column,
* fixed-width tables underlined by dashes (``debug ilpower port status``),
  where column boundaries are taken from the dashed separator.

Columns are always looked up by header text rather than by position so that
firmware releases which add or reorder columns still parse.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Sequence

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock
from gs1900ctl.models.port import DuplexMode, MediaType, PortSpeed

ABSENT_TOKENS = frozenset({"n/a", "na", "--", "-", "---", "none"})

SEPARATOR_RE = re.compile(r"^[\s\-=+|]+$")
_NUMBER_RE = re.compile(r"[-+]?\d+(?:\.\d+)?")
_UNIT_VALUE_RE = re.compile(r"^\s*([-+]?\d+(?:\.\d+)?)\s*([A-Za-z/%]*)")
_SPEED_RE = re.compile(r"^(a-)?(\d+)\s*(M|G)(?:b|bps|b/s)?$", re.IGNORECASE)
# Physical ports print as a bare number or with an Ethernet prefix. Link
# aggregation groups (``LAG1``) and the CPU are not physical ports.
_PHYSICAL_PREFIX = r"(?:GigabitEthernet|FastEthernet|TenGigabitEthernet|Ethernet|gi|ge|fe|te)?"
_PHYSICAL_PORT_RE = re.compile(rf"{_PHYSICAL_PREFIX}\s*(\d+)", re.IGNORECASE)
_PORT_RANGE_RE = re.compile(rf"{_PHYSICAL_PREFIX}(\d+)(?:-{_PHYSICAL_PREFIX}(\d+))?", re.IGNORECASE)
_LAG_RANGE_RE = re.compile(r"lag\s*(\d+)(?:-(?:lag\s*)?(\d+))?", re.IGNORECASE)


class LineKind(Enum):
    BLANK = "blank"
    HEADER = "header"
    SEPARATOR = "separator"
    DATA = "data"
    CONTINUATION = "continuation"


def is_absent(text: str | None) -> bool:
    """True for the placeholders the device prints for unsupported fields."""
    return text is None or text.strip().lower() in ABSENT_TOKENS


def text_or_none(text: str | None) -> str | None:
    if text is None or is_absent(text):
        return None
    return text.strip()


def is_separator(line: str) -> bool:
    return bool(line.strip()) and "-" in line and bool(SEPARATOR_RE.match(line))


def normalize_header(text: str) -> str:
    """Lower-case a header cell and squeeze whitespace and brackets away."""
    text = re.sub(r"[\[\]()]", " ", text.lower())
    return " ".join(text.split())


def parse_int(text: str, what: str = "value") -> int | None:
    """Parse an integer cell; placeholders map to ``None``."""
    if is_absent(text):
        return None
    try:
        return int(text.strip())
    except ValueError as e:
        raise ValueError(f"invalid {what} {text.strip()!r}") from e


def parse_float(text: str, what: str = "value") -> float | None:
    if is_absent(text):
        return None
    match = _NUMBER_RE.search(text)
    if not match:
        raise ValueError(f"invalid {what} {text.strip()!r}")
    return float(match.group(0))


_WATT_FACTORS = {"": 1.0, "w": 1.0, "watt": 1.0, "watts": 1.0, "mw": 0.001, "kw": 1000.0}
_METRE_FACTORS = {"": 1.0, "m": 1.0, "meter": 1.0, "meters": 1.0, "cm": 0.01}


def parse_watts(text: str) -> float | None:
    """Parse ``"170 Watts"``, ``"12Watts(7%)"`` or ``"5.2W"`` into watts."""
    return _parse_unit(text, _WATT_FACTORS, "power")


def parse_metres(text: str) -> float | None:
    """Parse a cable length such as ``"2.40"`` or ``"12 m"`` into metres."""
    return _parse_unit(text, _METRE_FACTORS, "length")


def _parse_unit(text: str, factors: dict[str, float], what: str) -> float | None:
    if is_absent(text):
        return None
    match = _UNIT_VALUE_RE.match(text)
    if not match:
        raise ValueError(f"invalid {what} {text.strip()!r}")
    unit = match.group(2).lower()
    if unit not in factors:
        raise ValueError(f"unknown {what} unit {match.group(2)!r}")
    return float(match.group(1)) * factors[unit]


def parse_uptime(text: str) -> int:
    """Parse ``"3 days, 4 hours, 5 mins, 6 secs"`` into seconds."""
    total = 0
    found = False
    for amount, unit in re.findall(r"(\d+)\s*(day|hour|hr|min|sec)", text.lower()):
        found = True
        total += int(amount) * {"day": 86400, "hour": 3600, "hr": 3600, "min": 60, "sec": 1}[unit]
    if not found:
        raise ValueError(f"invalid uptime {text.strip()!r}")
    return total


def parse_speed(text: str) -> PortSpeed:
    """Parse ``auto``, ``a-1000M``, ``100M``, ``1000Mb/s``, ``10G``..."""
    value = text.strip()
    if value.lower() == "auto":
        return PortSpeed(auto=True)
    match = _SPEED_RE.match(value)
    if not match:
        raise ValueError(f"invalid speed {value!r}")
    mbps = int(match.group(2)) * (1000 if match.group(3).upper() == "G" else 1)
    return PortSpeed(auto=match.group(1) is not None, mbps=mbps)


def parse_duplex(text: str) -> DuplexMode:
    value = text.strip().lower()
    if value.startswith("a-"):
        value = value[2:]
    try:
        return DuplexMode(value)
    except ValueError as e:
        raise ValueError(f"invalid duplex {text.strip()!r}") from e


def parse_media_type(text: str) -> MediaType:
    try:
        return MediaType(text.strip().lower())
    except ValueError as e:
        raise ValueError(f"invalid media type {text.strip()!r}") from e


def normalize_mac(text: str) -> str:
    """Normalize a MAC address to ``aa:bb:cc:dd:ee:ff``.

    Accepts colon, dash and Cisco dotted-triplet notation.
    """
    value = text.strip().lower()
    if re.fullmatch(r"[0-9a-f]{4}\.[0-9a-f]{4}\.[0-9a-f]{4}", value):
        digits = value.replace(".", "")
    elif re.fullmatch(r"[0-9a-f]{2}([:\-])[0-9a-f]{2}(\1[0-9a-f]{2}){4}", value):
        digits = re.sub(r"[:\-]", "", value)
    else:
        raise ValueError(f"invalid MAC address {text.strip()!r}")
    return ":".join(digits[i : i + 2] for i in range(0, 12, 2))


def parse_physical_port(text: str) -> int | None:
    """``"5"``, ``"gi5"`` or ``"GigabitEthernet5"`` is port 5; ``"LAG1"`` and ``"CPU"`` are ``None``."""
    match = _PHYSICAL_PORT_RE.fullmatch(text.strip())
    return int(match.group(1)) if match else None


def _expand(part: str, pattern: re.Pattern[str], ports: list[int]) -> bool:
    match = pattern.fullmatch(part)
    if not match:
        return False
    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    if end < start:
        raise ValueError(f"invalid port range {part!r}")
    ports.extend(range(start, end + 1))
    return True


def parse_member_list(text: str) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Split ``"1-4,7,lag1-2"`` into physical ports and LAG numbers.

    Returns ``((1, 2, 3, 4, 7), (1, 2))``. Placeholders yield empty tuples;
    members that are neither raise :class:`ValueError`.
    """
    if is_absent(text) or not text.strip():
        return (), ()
    ports: list[int] = []
    lags: list[int] = []
    for part in re.split(r"[,\s]+", text.strip()):
        if not part:
            continue
        if not _expand(part, _PORT_RANGE_RE, ports) and not _expand(part, _LAG_RANGE_RE, lags):
            raise ValueError(f"invalid port list element {part!r}")
    return tuple(sorted(set(ports))), tuple(sorted(set(lags)))


def parse_port_list(text: str) -> tuple[int, ...]:
    """Expand ``"1-4,7,9-10"`` into ``(1, 2, 3, 4, 7, 9, 10)``.

    Placeholders yield an empty tuple. Only physical ports are accepted.
    """
    ports, lags = parse_member_list(text)
    if lags:
        raise ValueError(f"LAG in physical port list {text.strip()!r}")
    return ports


def split_key_value(line: str, separator: str = ":") -> tuple[str, str] | None:
    """Split ``"Key   : value"`` at the first separator, or ``None``."""
    if separator not in line:
        return None
    key, value = line.split(separator, 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip()


# ── pipe-delimited tables ────────────────────────────────────────────


@dataclass
class PipeRow:
    """A data row with its cells keyed by normalized header text."""

    line_no: int
    line: str
    cells: dict[str, str]
    continuation: bool = False

    def get(self, *names: str) -> str:
        """Return the first cell whose header contains one of ``names``."""
        for name in names:
            wanted = normalize_header(name)
            if wanted in self.cells:
                return self.cells[wanted]
        for name in names:
            wanted = normalize_header(name)
            for key, value in self.cells.items():
                if key.startswith(wanted):
                    return value
        raise KeyError(names[0])

    def find(self, *names: str) -> str | None:
        try:
            return self.get(*names)
        except KeyError:
            return None


def split_pipes(line: str) -> list[str]:
    return [cell.strip() for cell in line.split("|")]


def iter_pipe_table(block: RawBlock, key_header: str) -> Iterator[PipeRow]:
    """Yield the data and continuation rows of a pipe-delimited table.

    The header row is the first pipe row whose cells contain ``key_header``.
    Pipe rows directly below it whose key cell is empty and which come before
    the separator extend the header text (unit rows such as ``[mW]``).
    After the separator, rows with an empty key cell are continuation rows.
    Rows with fewer cells than the header are right-aligned to it.
    """
    headers: list[str] | None = None
    header_done = False
    wanted = normalize_header(key_header)

    for line_no, line in block.numbered():
        if not line.strip():
            continue
        if "|" not in line and not is_separator(line):
            continue

        if headers is None:
            cells = split_pipes(line)
            if wanted in (normalize_header(c) for c in cells):
                headers = [normalize_header(c) for c in cells]
            continue

        if is_separator(line):
            header_done = True
            continue

        cells = split_pipes(line)
        if not header_done:
            if cells and not cells[0]:
                for i, extra in enumerate(cells[: len(headers)]):
                    if extra:
                        headers[i] = normalize_header(f"{headers[i]} {extra}")
                continue
            header_done = True

        if len(cells) < len(headers):
            cells = [""] * (len(headers) - len(cells)) + cells
        elif len(cells) > len(headers):
            # Pipes inside the last cell belong to its text.
            cells = cells[: len(headers) - 1] + [" | ".join(cells[len(headers) - 1 :])]

        keyed = dict(zip(headers, cells))
        yield PipeRow(line_no=line_no, line=line, cells=keyed, continuation=not cells[0])


def classify_pipe_line(line: str, key_header: str) -> LineKind:
    """Classify a single line of a pipe-delimited table."""
    if not line.strip():
        return LineKind.BLANK
    if is_separator(line):
        return LineKind.SEPARATOR
    cells = split_pipes(line)
    if normalize_header(key_header) in (normalize_header(c) for c in cells):
        return LineKind.HEADER
    if len(cells) > 1 and not cells[0]:
        return LineKind.CONTINUATION
    return LineKind.DATA


# ── fixed-width tables ───────────────────────────────────────────────


@dataclass
class FixedWidthTable:
    """Column layout of a fixed-width table derived from its dash separator."""

    headers: list[str]
    spans: list[tuple[int, int]]

    @classmethod
    def from_lines(cls, header_lines: Sequence[str], separator: str) -> FixedWidthTable:
        spans = [(m.start(), m.end()) for m in re.finditer(r"-+", separator)]
        headers: list[str] = []
        for i, (start, end) in enumerate(spans):
            # A header word may hang past its dashes; take text up to the next column.
            stop = spans[i + 1][0] if i + 1 < len(spans) else None
            parts = [line[start:stop].strip() if stop else line[start:].strip() for line in header_lines]
            headers.append(normalize_header(" ".join(p for p in parts if p)))
        return cls(headers=headers, spans=spans)

    def split(self, line: str) -> dict[str, str]:
        """Cut ``line`` into cells. The last column runs to the end of the line."""
        cells: dict[str, str] = {}
        for i, (start, _end) in enumerate(self.spans):
            stop = self.spans[i + 1][0] if i + 1 < len(self.spans) else None
            cells[self.headers[i]] = (line[start:stop] if stop is not None else line[start:]).strip()
        return cells

    def column(self, cells: dict[str, str], *names: str) -> str:
        for name in names:
            wanted = normalize_header(name)
            if wanted in cells:
                return cells[wanted]
        for name in names:
            wanted = normalize_header(name)
            for key, value in cells.items():
                if key.startswith(wanted):
                    return value
        raise KeyError(names[0])

    def has_column(self, *names: str) -> bool:
        try:
            self.column(dict.fromkeys(self.headers, ""), *names)
        except KeyError:
            return False
        return True


def iter_fixed_width_tables(numbered: Iterable[tuple[int, str]]) -> Iterator[tuple[FixedWidthTable, list[tuple[int, str]]]]:
    """Find every dash-underlined table among the ``numbered`` lines.

    Yields the table layout together with its numbered data rows (up to the
    next blank line). Header text is every non-blank line between the
    previous blank line and the separator.
    """
    lines = list(numbered)
    index = 0
    while index < len(lines):
        line_no, line = lines[index]
        if not (is_separator(line) and "|" not in line and re.search(r"-+\s+-+", line)):
            index += 1
            continue

        header_lines: list[str] = []
        back = index - 1
        while back >= 0 and lines[back][1].strip() and not is_separator(lines[back][1]):
            header_lines.insert(0, lines[back][1])
            back -= 1

        table = FixedWidthTable.from_lines(header_lines, line)
        rows: list[tuple[int, str]] = []
        index += 1
        while index < len(lines) and lines[index][1].strip():
            rows.append(lines[index])
            index += 1
        yield table, rows


def row_error(exc: Exception, line_no: int, line: str) -> ParseError:
    return ParseError(f"line {line_no}: {exc}", line_no=line_no, line=line)

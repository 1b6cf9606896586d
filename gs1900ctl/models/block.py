"""Raw command output and tabular parse results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, Sequence, TypeVar, overload

from gs1900ctl.exceptions import ParseError

T = TypeVar("T")


@dataclass(frozen=True)
class RawBlock:
    """Lines a command produced between its echo and the next prompt.

    Pagination markers are already resolved; line numbers reported by parsers
    are 1-based indexes into ``lines``.
    """

    command: str
    lines: tuple[str, ...] = ()

    @classmethod
    def from_text(cls, command: str, text: str) -> RawBlock:
        return cls(command=command, lines=tuple(text.splitlines()))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def numbered(self) -> Iterator[tuple[int, str]]:
        """Yield ``(line_no, line)`` pairs with 1-based line numbers."""
        return enumerate(self.lines, start=1)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class TableResult(Sequence[T], Generic[T]):
    """Rows a tabular parser produced, plus the rows it could not parse."""

    records: tuple[T, ...] = ()
    errors: tuple[ParseError, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.errors

    def filter(self, predicate: Callable[[T], bool]) -> TableResult[T]:
        """Keep only matching records. Row errors are carried over unchanged."""
        return TableResult(tuple(r for r in self.records if predicate(r)), self.errors)

    def first(self) -> T | None:
        return self.records[0] if self.records else None

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[T]: ...

    def __getitem__(self, index: int | slice) -> T | Sequence[T]:
        return self.records[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

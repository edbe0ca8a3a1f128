from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Line:
    id: int
    content: str
    is_input: bool = False


@dataclass(slots=True)
class LineLog:
    """Append-only line stream with a clear-all reset.

    `last_id` survives `clear()`, so an id is never handed out twice.
    """

    lines: list[Line] = field(default_factory=list)
    last_id: int = 0

    def append(self, content: str, *, is_input: bool = False) -> Line:
        self.last_id += 1
        line = Line(id=self.last_id, content=content, is_input=is_input)
        self.lines.append(line)
        return line

    def extend(self, contents: Iterable[str]) -> list[Line]:
        return [self.append(c) for c in contents]

    def clear(self) -> None:
        self.lines.clear()

    def after(self, line_id: int) -> list[Line]:
        return [line for line in self.lines if line.id > line_id]

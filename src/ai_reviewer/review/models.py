from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class ContextLine:
    """Строка без изменений, есть в обеих версиях файла."""

    old_line: int
    new_line: int
    content: str

    @property
    def display_line(self) -> int:
        return self.new_line


@dataclass(frozen=True)
class AddedLine:
    new_line: int
    content: str

    @property
    def display_line(self) -> int:
        return self.new_line


@dataclass(frozen=True)
class RemovedLine:
    old_line: int
    content: str

    @property
    def display_line(self) -> int:
        return self.old_line


LineChange = Union[ContextLine, AddedLine, RemovedLine]


@dataclass
class Hunk:
    content: str
    changes: list[LineChange] = field(default_factory=list)
    source_start: int = 0
    target_start: int = 0


@dataclass
class DiffFile:
    path: str | None
    hunks: list[Hunk] = field(default_factory=list)
    source_path: str | None = None

    @property
    def is_deleted(self) -> bool:
        return self.path is None


@dataclass(frozen=True)
class PRContext:
    owner: str
    repo: str
    pull_number: int
    title: str = ""
    description: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ReviewUnit:
    """Один hunk одного файла, отправляется модели отдельно."""

    file: DiffFile
    hunk: Hunk
    valid_lines: frozenset[int]
    index: int = 0

    @property
    def path(self) -> str | None:
        return self.file.path

    @property
    def sort_key(self) -> tuple[str, int, int]:
        return (self.file.path or "", self.hunk.target_start, self.index)


@dataclass(frozen=True)
class Comment:
    path: str
    line: int
    body: str

    def as_github(self) -> dict[str, Any]:
        return {"path": self.path, "line": self.line, "body": self.body}


@dataclass(frozen=True)
class RejectedSuggestion:
    path: str | None
    line: Any
    comment: Any
    reason: str


@dataclass
class ReconcileResult:
    comments: list[Comment] = field(default_factory=list)
    rejected: list[RejectedSuggestion] = field(default_factory=list)

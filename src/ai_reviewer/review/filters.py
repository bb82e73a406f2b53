import fnmatch
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ai_reviewer.review.models import DiffFile

GLOBSTAR = "**"


def split_patterns(raw: str | Iterable[str] | None) -> list[str]:
    """Разбить список glob-шаблонов через запятую, пустые отбросить."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    return [p.strip() for p in parts if p and p.strip()]


def matches(path: str, pattern: str) -> bool:
    """Сопоставление по сегментам пути, как в minimatch.

    ``*`` не переходит через ``/``, ``**`` совпадает с нулём или более
    сегментов в любом месте шаблона. Скрытые файлы и каталоги совпадают
    только с шаблоном, сегмент которого сам начинается с точки.
    """
    if not path:
        return False
    return _match_segments(path.split("/"), pattern.split("/"))


def _match_segments(parts: list[str], pattern: list[str]) -> bool:
    if not pattern:
        return not parts

    head, rest = pattern[0], pattern[1:]
    if head == GLOBSTAR:
        for i in range(len(parts) + 1):
            if i > 0 and parts[i - 1].startswith("."):
                break
            if _match_segments(parts[i:], rest):
                return True
        return False

    if not parts or not _match_segment(parts[0], head):
        return False
    return _match_segments(parts[1:], rest)


def _match_segment(name: str, pattern: str) -> bool:
    if name.startswith(".") and not pattern.startswith("."):
        return False
    return fnmatch.fnmatchcase(name, pattern)


def is_included(path: str | None, exclude: Sequence[str] = (), include: Sequence[str] = ()) -> bool:
    """Exclude важнее include; пустой include пропускает всё."""
    path = path or ""
    exclude = split_patterns(exclude)
    include = split_patterns(include)

    if any(matches(path, p) for p in exclude):
        return False
    if not include:
        return True
    return any(matches(path, p) for p in include)


def filter_files(
    files: Iterable["DiffFile"], exclude: Sequence[str] = (), include: Sequence[str] = ()
) -> list["DiffFile"]:
    return [f for f in files if is_included(f.path, exclude, include)]

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError
from unidiff.patch import Hunk as PatchHunk

from ai_reviewer.errors import DiffParseError
from ai_reviewer.review.models import AddedLine, ContextLine, DiffFile, Hunk, LineChange, RemovedLine

DEV_NULL = "/dev/null"


def parse_diff(text: str | None) -> list[DiffFile]:
    """Разобрать unified diff в список DiffFile."""
    if not text or not text.strip():
        return []

    try:
        patch = PatchSet(text)
    except UnidiffParseError as e:
        raise DiffParseError(f"Could not parse diff: {e}") from e

    # unidiff собирает заголовок hunk заново из чисел, исходный берём из текста
    raw_lines = text.split("\n")
    files = []
    for patched_file in patch:
        files.append(
            DiffFile(
                path=_strip_prefix(patched_file.target_file, "b/"),
                source_path=_strip_prefix(patched_file.source_file, "a/"),
                hunks=[_convert_hunk(h, raw_lines) for h in patched_file],
            )
        )
    return files


def _strip_prefix(name: str | None, prefix: str) -> str | None:
    if not name or name == DEV_NULL:
        return None
    if name.startswith(prefix):
        return name[len(prefix):]
    return name


def _raw_header(hunk: PatchHunk, raw_lines: list[str]) -> str:
    first = hunk[0] if hunk else None
    if first is not None and first.diff_line_no and first.diff_line_no >= 2:
        # diff_line_no считается с 1, заголовок стоит строкой выше
        header = raw_lines[first.diff_line_no - 2].rstrip("\r")
        if header.startswith("@@"):
            return header

    header = f"@@ -{hunk.source_start},{hunk.source_length} +{hunk.target_start},{hunk.target_length} @@"
    if hunk.section_header:
        header += f" {hunk.section_header}"
    return header


def _convert_hunk(hunk: PatchHunk, raw_lines: list[str]) -> Hunk:
    header = _raw_header(hunk, raw_lines)

    changes: list[LineChange] = []
    for line in hunk:
        content = line.line_type + line.value.rstrip("\r\n")
        if line.is_added:
            changes.append(AddedLine(new_line=line.target_line_no, content=content))
        elif line.is_removed:
            changes.append(RemovedLine(old_line=line.source_line_no, content=content))
        elif line.is_context:
            changes.append(
                ContextLine(old_line=line.source_line_no, new_line=line.target_line_no, content=content)
            )
        # "\ No newline at end of file" без номеров строк, пропускаем

    return Hunk(
        content=header,
        changes=changes,
        source_start=hunk.source_start,
        target_start=hunk.target_start,
    )

from collections.abc import Iterable

from ai_reviewer.review.models import AddedLine, ContextLine, DiffFile, Hunk, ReviewUnit


def valid_target_lines(hunk: Hunk, expand_context_ranges: bool = True) -> frozenset[int]:
    """Номера строк, к которым можно привязать комментарий в этом hunk.

    Добавленные и контекстные строки дают свой новый номер. У контекстной
    строки есть пара (старый, новый); при ``expand_context_ranges`` весь
    диапазон между ними включительно тоже считается допустимым.
    Удалённых строк в новой версии файла нет, они ничего не дают.
    """
    lines: set[int] = set()
    for change in hunk.changes:
        if isinstance(change, AddedLine):
            lines.add(change.new_line)
        elif isinstance(change, ContextLine):
            lines.add(change.new_line)
            if expand_context_ranges and change.old_line <= change.new_line:
                lines.update(range(change.old_line, change.new_line + 1))
    return frozenset(n for n in lines if n > 0)


def decompose(files: Iterable[DiffFile], expand_context_ranges: bool = True) -> list[ReviewUnit]:
    """По одному ReviewUnit на каждый hunk файлов, которые не удалены."""
    units = []
    for file in files:
        if file.is_deleted:
            continue
        for hunk in file.hunks:
            units.append(
                ReviewUnit(
                    file=file,
                    hunk=hunk,
                    valid_lines=valid_target_lines(hunk, expand_context_ranges),
                    index=len(units),
                )
            )
    return units

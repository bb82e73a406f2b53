import math
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ai_reviewer.llm.schemas import ModelSuggestion, ReviewPayload
from ai_reviewer.review.models import Comment, ReconcileResult, RejectedSuggestion, ReviewUnit

console = Console()


def coerce_line_number(value: Any) -> int | None:
    """Привести номер строки от модели к int. Никогда не бросает исключений."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def reconcile(unit: ReviewUnit, payload: ReviewPayload | None) -> ReconcileResult:
    """Сверить замечания модели с допустимыми строками hunk.

    Замечания со строкой вне ``unit.valid_lines`` или с некорректной
    структурой отбрасываются и логируются, остальные становятся Comment.
    """
    result = ReconcileResult()
    if payload is None:
        return result

    for raw in payload.reviews:
        try:
            suggestion = ModelSuggestion.model_validate(raw)
        except ValidationError:
            line = raw.get("lineNumber") if isinstance(raw, dict) else None
            comment = raw.get("reviewComment") if isinstance(raw, dict) else raw
            _reject(result, unit, line, comment, "malformed suggestion")
            continue

        line = coerce_line_number(suggestion.lineNumber)
        if line is None or line not in unit.valid_lines:
            _reject(result, unit, suggestion.lineNumber, suggestion.reviewComment, "line not in hunk")
            continue

        if unit.path is None:
            continue
        result.comments.append(Comment(path=unit.path, line=line, body=suggestion.reviewComment))

    return result


def _reject(result: ReconcileResult, unit: ReviewUnit, line: Any, comment: Any, reason: str) -> None:
    rejected = RejectedSuggestion(path=unit.path, line=line, comment=comment, reason=reason)
    result.rejected.append(rejected)
    console.print(
        f"[yellow]Невалидный номер строки: {escape(str(line))} в файле: {escape(str(unit.path))}[/yellow]\n"
        f"Комментарий: {escape(str(comment))}",
        soft_wrap=True,
    )

from typing import Protocol

from rich.console import Console
from rich.markup import escape

from ai_reviewer.review.models import Comment, ReviewUnit

console = Console()


class ReviewPoster(Protocol):
    def post_review(self, comments: list[Comment]) -> None: ...


class CommentAggregator:
    """Собирает комментарии всех hunk в детерминированном порядке."""

    def __init__(self):
        self._batches: list[tuple[tuple, list[Comment]]] = []

    def add(self, unit: ReviewUnit, comments: list[Comment]) -> None:
        self._batches.append((unit.sort_key, list(comments)))

    def comments(self) -> list[Comment]:
        ordered = sorted(self._batches, key=lambda batch: batch[0])
        return [c for _, batch in ordered for c in batch]

    def finalize(self) -> list[Comment]:
        return [c for c in self.comments() if c.line > 0]

    def publish(self, poster: ReviewPoster) -> list[Comment]:
        """Опубликовать комментарии. Пустой набор не публикуется вовсе."""
        comments = self.finalize()
        if not comments:
            console.print("[yellow]Нет валидных комментариев для публикации[/yellow]")
            return []

        for c in comments:
            console.print(
                f"[dim]Комментарий к публикации: {escape(c.body)} в {escape(c.path)}:{c.line}[/dim]",
                soft_wrap=True,
            )
        poster.post_review(comments)
        return comments

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Protocol

from rich.console import Console
from rich.markup import escape

from ai_reviewer.llm.prompts import build_review_prompt
from ai_reviewer.llm.schemas import ReviewPayload
from ai_reviewer.review.aggregator import CommentAggregator, ReviewPoster
from ai_reviewer.review.diff import parse_diff
from ai_reviewer.review.filters import filter_files
from ai_reviewer.review.models import Comment, DiffFile, PRContext, ReviewUnit
from ai_reviewer.review.reconciler import reconcile
from ai_reviewer.review.units import decompose

if TYPE_CHECKING:
    from ai_reviewer.config import Settings

console = Console()


class ReviewModel(Protocol):
    def get_review(self, prompt: str) -> ReviewPayload | None: ...


class ReviewPipeline:
    def __init__(self, settings: "Settings", llm: ReviewModel):
        self.settings = settings
        self.llm = llm

    def review(self, diff: str | None, pr: PRContext, poster: ReviewPoster) -> list[Comment]:
        """Разобрать diff, получить замечания и опубликовать их. Возвращает опубликованное."""
        if not diff:
            console.print("[yellow]Diff не найден[/yellow]")
            return []

        files = parse_diff(diff)
        aggregator = self._collect(files, pr)
        return aggregator.publish(poster)

    def run(self, files: list[DiffFile], pr: PRContext) -> list[Comment]:
        return self._collect(files, pr).finalize()

    def _collect(self, files: list[DiffFile], pr: PRContext) -> CommentAggregator:
        filtered = filter_files(files, self.settings.exclude_patterns, self.settings.include_patterns)
        console.print(f"[dim]Файлов в diff: {len(files)}, на ревью: {len(filtered)}[/dim]")

        units = decompose(filtered, self.settings.expand_context_ranges)
        aggregator = CommentAggregator()

        if self.settings.max_workers > 1 and len(units) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.max_workers) as pool:
                results = list(pool.map(lambda u: self._review_unit(u, pr), units))
        else:
            results = [self._review_unit(unit, pr) for unit in units]

        for unit, comments in zip(units, results):
            aggregator.add(unit, comments)
        return aggregator

    def _review_unit(self, unit: ReviewUnit, pr: PRContext) -> list[Comment]:
        console.print(f"[blue]Анализирую {escape(unit.path or '')} ({escape(unit.hunk.content)})...[/blue]")
        try:
            prompt = build_review_prompt(unit.file, unit.hunk, pr)
            payload = self.llm.get_review(prompt)
            return reconcile(unit, payload).comments
        except Exception as e:
            console.print(f"[red]Ошибка при ревью {escape(unit.path or '')}: {escape(str(e))}[/red]")
            return []

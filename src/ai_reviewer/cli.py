from datetime import datetime, timezone
from pathlib import Path

import httpx
import typer
from github import GithubException
from rich.console import Console
from rich.markup import escape

from ai_reviewer.config import Settings, get_settings
from ai_reviewer.errors import ReviewError
from ai_reviewer.export import collect_comments, write_csv
from ai_reviewer.github import GitHubClient, GitHubPoster
from ai_reviewer.github.events import (
    get_event_diff,
    get_pr_context,
    get_pr_context_by_number,
    load_event,
    repo_full_name,
    resolve_event_name,
)
from ai_reviewer.llm import LLMClient
from ai_reviewer.review.models import Comment
from ai_reviewer.review.pipeline import ReviewPipeline

app = typer.Typer(
    name="ai-reviewer",
    help="AI-ревью pull request'ов с комментариями к строкам кода",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


def parse_date(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        raise typer.BadParameter("Invalid date format. Please use YYYY-MM-DD.")


def parse_pr_numbers(value: str | None) -> list[int] | None:
    if not value:
        return None
    try:
        return [int(n.strip()) for n in value.split(",") if n.strip()]
    except ValueError:
        raise typer.BadParameter("PR numbers must be a comma-separated list of integers.")


def run_review(settings: Settings, pr_number: int | None = None) -> list[Comment]:
    """Выполнить ревью PR: по номеру или по событию GitHub Actions."""
    if pr_number is not None:
        if not settings.github_repository:
            raise ReviewError("Repository is required when --pr is given")
        client = GitHubClient(settings.github_token, settings.github_repository)
        pr = get_pr_context_by_number(client, pr_number)
        diff = client.get_pr_diff(pr_number)
    else:
        if not settings.github_event_path:
            raise ReviewError("GITHUB_EVENT_PATH is not set; pass --pr and --repo for a manual run")
        payload = load_event(settings.github_event_path)
        event = resolve_event_name(settings.github_event_name, payload)
        console.print(f"[dim]Событие: {settings.github_event_name}, action: {event}[/dim]")
        client = GitHubClient(settings.github_token, repo_full_name(payload))
        pr = get_pr_context(client, event, payload)
        diff = get_event_diff(client, event, pr, payload)

    console.print(f"[blue]Ревью PR #{pr.pull_number} в {pr.full_name}...[/blue]")
    pipeline = ReviewPipeline(settings, LLMClient(settings))
    return pipeline.review(diff, pr, GitHubPoster(client, pr.pull_number))


@app.command()
def review(
    pr: int | None = typer.Option(None, "--pr", "-p", help="Номер PR (без него читается событие GitHub Actions)"),
    repo: str | None = typer.Option(None, "--repo", "-r", help="Репозиторий (owner/repo)"),
    token: str | None = typer.Option(None, "--token", "-t", help="GitHub токен"),
    exclude: str | None = typer.Option(None, "--exclude", help="Glob-шаблоны исключаемых файлов через запятую"),
    include: str | None = typer.Option(None, "--include", help="Glob-шаблоны включаемых файлов через запятую"),
    model: str | None = typer.Option(None, "--model", "-m", help="Модель LLM"),
):
    """Проверить PR и оставить комментарии к строкам."""
    settings = get_settings()
    if repo:
        settings.github_repository = repo
    if token:
        settings.github_token = token
    if exclude is not None:
        settings.exclude = exclude
    if include is not None:
        settings.include = include
    if model:
        settings.llm_model = model

    try:
        comments = run_review(settings, pr)
    except ReviewError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    except GithubException as e:
        data = e.data if isinstance(e.data, dict) else {}
        console.print(f"[red]Ошибка GitHub: {escape(str(data.get('message', e)))}[/red]")
        raise typer.Exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Не удалось получить diff: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if comments:
        console.print(f"[green]Опубликовано комментариев: {len(comments)}[/green]")
    else:
        console.print("[dim]Нет комментариев[/dim]")


@app.command("export-comments")
def export_comments(
    repo: str = typer.Option(..., "--repo", "-r", help="Репозиторий (owner/repo)"),
    since: str | None = typer.Option(None, "--since", "-s", help="Комментарии с даты (YYYY-MM-DD)"),
    until: str | None = typer.Option(None, "--until", "-u", help="Комментарии по дату (YYYY-MM-DD)"),
    prs: str | None = typer.Option(None, "--prs", "-p", help="Номера PR через запятую"),
    author: str | None = typer.Option(None, "--author", "-a", help="Автор комментариев"),
    output: Path = typer.Option(Path("pr_comments.csv"), "--output", "-o", help="CSV-файл"),
    token: str | None = typer.Option(None, "--token", "-t", help="GitHub токен"),
):
    """Выгрузить комментарии ревью из PR в CSV."""
    since_date = parse_date(since)
    until_date = parse_date(until)
    pr_numbers = parse_pr_numbers(prs)
    if pr_numbers is None and since_date is None:
        raise typer.BadParameter("Either --since or --prs is required.")

    settings = get_settings()
    try:
        client = GitHubClient(token or settings.github_token, repo)
        comments = collect_comments(client, since_date, until_date, author, pr_numbers)
    except GithubException as e:
        data = e.data if isinstance(e.data, dict) else {}
        console.print(f"[red]Ошибка GitHub: {escape(str(data.get('message', e)))}[/red]")
        raise typer.Exit(1)

    path = write_csv(comments, output)
    console.print(f"[green]CSV записан: {path} ({len(comments)} комментариев)[/green]")


if __name__ == "__main__":
    app()

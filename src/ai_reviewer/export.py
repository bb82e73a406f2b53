"""Выгрузка комментариев ревью из PR в CSV.

Реакции на комментарий используются как оценка его качества: по ним
комментарий попадает в одну или несколько категорий.
"""

import csv
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from github import GithubException
from rich.console import Console

from ai_reviewer.github.client import GitHubClient

console = Console()

REACTION_TO_CATEGORY = {
    "+1": "Useful",
    "eyes": "Noisy",
    "confused": "Hallucination",
    "rocket": "Teachable",
    "-1": "Incorrect",
}
NO_CATEGORY = "None"

CSV_HEADER = ["Date", "Author", "Repository", "PR Number", "Category", "Comment", "Comment Link"]


@dataclass
class ExportedComment:
    date: str
    author: str
    repository: str
    pr_number: int
    comment: str
    comment_link: str
    category: list[str] = field(default_factory=list)

    def as_row(self) -> list[str]:
        return [
            self.date,
            self.author,
            self.repository,
            str(self.pr_number),
            ",".join(self.category),
            self.comment,
            self.comment_link,
        ]


def extract_categories(reactions: dict[str, Any] | None) -> list[str]:
    categories = [
        category
        for reaction, category in REACTION_TO_CATEGORY.items()
        if _count(reactions, reaction) > 0
    ]
    return categories or [NO_CATEGORY]


def _count(reactions: dict[str, Any] | None, reaction: str) -> int:
    try:
        return int((reactions or {}).get(reaction) or 0)
    except (TypeError, ValueError):
        return 0


def fetch_pr_comments(client: GitHubClient, pr_number: int, author: str | None = None) -> list[ExportedComment]:
    """Комментарии одного PR. Ошибка GitHub не прерывает выгрузку остальных PR."""
    try:
        raw_comments = client.get_review_comments(pr_number)
    except GithubException as e:
        console.print(f"[red]Не удалось получить комментарии PR #{pr_number}: {e.status}[/red]")
        return []

    comments = []
    for c in raw_comments:
        data = c.raw_data
        exported = ExportedComment(
            date=data.get("created_at", ""),
            author=(data.get("user") or {}).get("login", ""),
            repository=client.repo_name,
            pr_number=pr_number,
            category=extract_categories(data.get("reactions")),
            comment=data.get("body", ""),
            comment_link=data.get("html_url", ""),
        )
        if author and exported.author != author:
            continue
        comments.append(exported)
    return comments


def collect_comments(
    client: GitHubClient,
    since: datetime | None = None,
    until: datetime | None = None,
    author: str | None = None,
    pr_numbers: Iterable[int] | None = None,
) -> list[ExportedComment]:
    if pr_numbers is None:
        if since is None:
            raise ValueError("since is required when PR numbers are not given")
        until = until or datetime.now(since.tzinfo)
        pr_numbers = [pr.number for pr in client.get_pulls_updated_between(since, until)]

    comments = []
    for number in pr_numbers:
        console.print(f"[blue]Получаю комментарии {client.repo_name}/pull/{number}...[/blue]")
        comments.extend(fetch_pr_comments(client, number, author))
    return comments


def write_csv(comments: Iterable[ExportedComment], path: str | Path) -> Path:
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for c in comments:
            writer.writerow(c.as_row())
    return path

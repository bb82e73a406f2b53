"""Определение PR и diff по событию GitHub Actions.

Поддерживаются события ``pull_request`` (``opened``, ``synchronize``) и ``push``
в ветку, для которой открыт PR.
"""

import json
from pathlib import Path
from typing import Any

from ai_reviewer.errors import EventError, UnsupportedEventError
from ai_reviewer.github.client import GitHubClient
from ai_reviewer.review.models import PRContext

SUPPORTED_EVENTS = ("opened", "synchronize", "push")


def load_event(event_path: str | Path) -> dict[str, Any]:
    try:
        return json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise EventError(f"Не удалось прочитать событие {event_path}: {e}") from e


def resolve_event_name(event_name: str | None, payload: dict[str, Any]) -> str | None:
    """Для pull_request важен action из payload, а не имя события."""
    if event_name == "pull_request":
        return payload.get("action")
    return event_name


def owner_and_repo(payload: dict[str, Any]) -> tuple[str, str]:
    repository = payload.get("repository") or {}
    try:
        return repository["owner"]["login"], repository["name"]
    except (KeyError, TypeError) as e:
        raise EventError("Invalid event payload: missing repository") from e


def repo_full_name(payload: dict[str, Any]) -> str:
    return "/".join(owner_and_repo(payload))


def ensure_supported(event: str | None, payload: dict[str, Any]) -> str:
    if event not in SUPPORTED_EVENTS:
        raise UnsupportedEventError(event, payload.get("action"))
    return event


def get_pr_context(client: GitHubClient, event: str | None, payload: dict[str, Any]) -> PRContext:
    event = ensure_supported(event, payload)
    if event in ("opened", "synchronize"):
        return _pr_from_event(client, payload)
    return _pr_from_push(client, payload)


def _pr_from_event(client: GitHubClient, payload: dict[str, Any]) -> PRContext:
    number = payload.get("number")
    if not payload.get("repository") or not number:
        raise EventError("Invalid event payload: missing repository or number")
    owner, repo = owner_and_repo(payload)

    pr = client.get_pr(number)
    return PRContext(
        owner=owner,
        repo=repo,
        pull_number=number,
        title=pr.title or "",
        description=pr.body or "",
    )


def _pr_from_push(client: GitHubClient, payload: dict[str, Any]) -> PRContext:
    branch = (payload.get("ref") or "").removeprefix("refs/heads/")
    owner, repo = owner_and_repo(payload)

    pr = client.find_open_pr_for_branch(branch)
    if pr is None:
        raise EventError("No associated pull request found for this push event.")

    return PRContext(
        owner=owner,
        repo=repo,
        pull_number=pr.number,
        title=pr.title or "",
        description=pr.body or "",
    )


def get_event_diff(client: GitHubClient, event: str | None, pr: PRContext, payload: dict[str, Any]) -> str | None:
    event = ensure_supported(event, payload)
    if event in ("opened", "push"):
        return client.get_pr_diff(pr.pull_number)

    base, head = payload.get("before"), payload.get("after")
    if not base or not head:
        raise EventError("Invalid event payload: missing before/after commits")
    return client.compare_diff(base, head)


def get_pr_context_by_number(client: GitHubClient, pr_number: int) -> PRContext:
    """Ручной запуск: PR задан номером, а не событием."""
    owner, _, repo = client.repo_name.partition("/")
    pr = client.get_pr(pr_number)
    return PRContext(
        owner=owner,
        repo=repo,
        pull_number=pr_number,
        title=pr.title or "",
        description=pr.body or "",
    )

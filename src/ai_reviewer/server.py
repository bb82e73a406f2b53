import hashlib
import hmac
from contextlib import asynccontextmanager

import httpx
from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from github import GithubException
from rich.console import Console
from rich.markup import escape

from ai_reviewer.config import Settings
from ai_reviewer.errors import ReviewError
from ai_reviewer.github import GitHubClient, GitHubPoster
from ai_reviewer.github.app_auth import GitHubAppAuth
from ai_reviewer.github.events import get_event_diff, get_pr_context, repo_full_name
from ai_reviewer.llm import LLMClient
from ai_reviewer.review.models import Comment
from ai_reviewer.review.pipeline import ReviewPipeline

console = Console()

REVIEW_ACTIONS = ("opened", "synchronize")

settings = Settings()
app_auth = GitHubAppAuth(
    app_id=settings.github_app_id or "",
    private_key=settings.github_private_key or "",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    console.print("[green]Сервер запущен[/green]")
    yield
    console.print("[yellow]Сервер остановлен[/yellow]")


app = FastAPI(lifespan=lifespan)


def verify_signature(payload: bytes, signature: str, secret: str | None) -> bool:
    if not secret:
        return True
    expected = "sha256=" + hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


@app.post("/webhook")
async def webhook(request: Request, background_tasks: BackgroundTasks):
    payload = await request.body()
    signature = request.headers.get("X-Hub-Signature-256", "")

    if not verify_signature(payload, signature, settings.github_webhook_secret):
        raise HTTPException(status_code=401, detail="Invalid signature")

    event = request.headers.get("X-GitHub-Event")
    data = await request.json()

    if event == "pull_request" and data.get("action") in REVIEW_ACTIONS:
        if not app_auth.configured:
            raise HTTPException(status_code=503, detail="GitHub App is not configured")
        # Ревью долгое и синхронное, GitHub ждёт ответа не больше 10 секунд
        background_tasks.add_task(handle_pr_review, data)
        return {"status": "queued"}

    return {"status": "ignored"}


def handle_pr_review(data: dict) -> list[Comment]:
    try:
        return review_pull_request(data)
    except (ReviewError, GithubException, httpx.HTTPError) as e:
        console.print(f"[red]Ошибка ревью PR #{data.get('number')}: {escape(str(e))}[/red]")
        return []


def review_pull_request(data: dict) -> list[Comment]:
    installation_id = data["installation"]["id"]
    full_name = repo_full_name(data)
    action = data["action"]

    console.print(f"[blue]Ревью PR #{data.get('number')} в {full_name} ({action})[/blue]")

    token = app_auth.get_installation_token(installation_id)
    run_settings = settings.model_copy(update={"github_token": token, "github_repository": full_name})

    client = GitHubClient(token, full_name)
    pr = get_pr_context(client, action, data)
    diff = get_event_diff(client, action, pr, data)

    pipeline = ReviewPipeline(run_settings, LLMClient(run_settings))
    comments = pipeline.review(diff, pr, GitHubPoster(client, pr.pull_number))
    console.print(f"[green]Ревью PR #{pr.pull_number}: комментариев {len(comments)}[/green]")
    return comments


@app.get("/health")
async def health():
    return {"status": "healthy"}

from datetime import datetime

import httpx
from github import Github
from github.PullRequest import PullRequest
from github.PullRequestComment import PullRequestComment
from github.Repository import Repository

from ai_reviewer.review.models import Comment

GITHUB_API_URL = "https://api.github.com"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


class GitHubClient:
    def __init__(self, token: str, repo_name: str, api_url: str = GITHUB_API_URL):
        self.token = token
        self.repo_name = repo_name
        self.api_url = api_url.rstrip("/")
        self.github = Github(token)
        self.repo: Repository = self.github.get_repo(repo_name)

    def get_pr(self, number: int) -> PullRequest:
        return self.repo.get_pull(number)

    def find_open_pr_for_branch(self, branch: str) -> PullRequest | None:
        for pr in self.repo.get_pulls(state="open"):
            if pr.head.ref == branch:
                return pr
        return None

    def get_pr_diff(self, pr_number: int) -> str:
        return self._get_diff(f"/repos/{self.repo_name}/pulls/{pr_number}")

    def compare_diff(self, base: str, head: str) -> str:
        return self._get_diff(f"/repos/{self.repo_name}/compare/{base}...{head}")

    def _get_diff(self, path: str) -> str:
        resp = httpx.get(
            f"{self.api_url}{path}",
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": DIFF_MEDIA_TYPE,
            },
            follow_redirects=True,
            timeout=60,
        )
        resp.raise_for_status()
        return resp.text

    def post_review(self, pr_number: int, comments: list[Comment]) -> None:
        pr = self.get_pr(pr_number)
        pr.create_review(event="COMMENT", comments=[c.as_github() for c in comments])

    def get_review_comments(self, pr_number: int) -> list[PullRequestComment]:
        return list(self.get_pr(pr_number).get_review_comments())

    def get_pulls_updated_between(self, since: datetime, until: datetime) -> list[PullRequest]:
        """PR, обновлённые в интервале [since, until], от новых к старым."""
        pulls = []
        for pr in self.repo.get_pulls(state="all", sort="updated", direction="desc"):
            updated = pr.updated_at
            if updated < since:
                break
            if updated <= until:
                pulls.append(pr)
        return pulls


class GitHubPoster:
    """Публикует комментарии в конкретный PR."""

    def __init__(self, client: GitHubClient, pr_number: int):
        self.client = client
        self.pr_number = pr_number

    def post_review(self, comments: list[Comment]) -> None:
        self.client.post_review(self.pr_number, comments)

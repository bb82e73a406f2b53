from ai_reviewer.github.client import GitHubClient, GitHubPoster

__all__ = ["GitHubClient", "GitHubPoster"]

import json
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from ai_reviewer import cli
from ai_reviewer.review.models import Comment

from conftest import A_TS_DIFF, FakeLLM

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GITHUB_EVENT_PATH", "GITHUB_EVENT_NAME", "GITHUB_REPOSITORY", "EXCLUDE", "INCLUDE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def github(monkeypatch):
    client = MagicMock()
    client.repo_name = "octo/demo"
    client.get_pr.return_value = MagicMock(title="Add c and d", body="")
    client.get_pr_diff.return_value = A_TS_DIFF
    monkeypatch.setattr(cli, "GitHubClient", MagicMock(return_value=client))
    return client


def use_llm(monkeypatch, payload):
    monkeypatch.setattr(cli, "LLMClient", lambda settings: FakeLLM(default=payload))


class TestParseDate:
    def test_valid(self):
        assert cli.parse_date("2024-03-01").isoformat() == "2024-03-01T00:00:00+00:00"

    def test_invalid(self):
        result = runner.invoke(cli.app, ["export-comments", "--repo", "o/r", "--since", "03/01/2024"])
        assert result.exit_code == 2
        assert "YYYY-MM-DD" in result.output


class TestReviewCommand:
    def test_without_event_fails(self):
        result = runner.invoke(cli.app, ["review"])
        assert result.exit_code == 1

    def test_manual_run_posts_comments(self, monkeypatch, github):
        use_llm(monkeypatch, {"reviews": [{"lineNumber": 11, "reviewComment": "why?"}]})
        result = runner.invoke(cli.app, ["review", "--pr", "7", "--repo", "octo/demo"])
        assert result.exit_code == 0, result.output
        github.post_review.assert_called_once_with(7, [Comment("a.ts", 11, "why?")])

    def test_event_run(self, monkeypatch, github, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"action": "opened", "number": 7, "repository": {"name": "demo", "owner": {"login": "octo"}}}))
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
        monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request")
        use_llm(monkeypatch, {"reviews": []})

        result = runner.invoke(cli.app, ["review"])

        assert result.exit_code == 0, result.output
        github.get_pr_diff.assert_called_once_with(7)
        github.post_review.assert_not_called()

    def test_exclude_option(self, monkeypatch, github):
        use_llm(monkeypatch, {"reviews": [{"lineNumber": 10, "reviewComment": "x"}]})
        result = runner.invoke(cli.app, ["review", "--pr", "7", "--repo", "octo/demo", "--exclude", "*.ts"])
        assert result.exit_code == 0, result.output
        github.post_review.assert_not_called()

    def test_unsupported_event(self, monkeypatch, github, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"action": "closed", "repository": {"name": "demo", "owner": {"login": "octo"}}}))
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
        monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request")

        result = runner.invoke(cli.app, ["review"])
        assert result.exit_code == 1

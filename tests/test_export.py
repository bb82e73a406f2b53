import csv
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from github import GithubException

from ai_reviewer.export import (
    CSV_HEADER,
    ExportedComment,
    collect_comments,
    extract_categories,
    fetch_pr_comments,
    write_csv,
)


def raw_comment(author="bot", body="Use a constant", reactions=None, id_=1):
    return SimpleNamespace(
        raw_data={
            "id": id_,
            "created_at": "2024-05-01T10:00:00Z",
            "user": {"login": author},
            "body": body,
            "html_url": f"https://github.com/octo/demo/pull/3#discussion_r{id_}",
            "reactions": reactions or {},
        }
    )


@pytest.fixture
def client():
    client = MagicMock()
    client.repo_name = "octo/demo"
    return client


class TestExtractCategories:
    def test_positive_reactions(self):
        assert extract_categories({"+1": 2, "eyes": 0, "rocket": 1, "total_count": 3}) == ["Useful", "Teachable"]

    def test_no_reactions(self):
        assert extract_categories({"+1": 0, "-1": 0}) == ["None"]
        assert extract_categories(None) == ["None"]

    def test_all_categories(self):
        reactions = {"+1": 1, "eyes": 1, "confused": 1, "rocket": 1, "-1": 1}
        assert extract_categories(reactions) == ["Useful", "Noisy", "Hallucination", "Teachable", "Incorrect"]


class TestFetchPrComments:
    def test_maps_fields(self, client):
        client.get_review_comments.return_value = [raw_comment(reactions={"confused": 1})]
        [c] = fetch_pr_comments(client, 3)
        assert c.author == "bot"
        assert c.repository == "octo/demo"
        assert c.pr_number == 3
        assert c.category == ["Hallucination"]
        assert c.comment_link.endswith("discussion_r1")

    def test_author_filter(self, client):
        client.get_review_comments.return_value = [raw_comment(author="bot"), raw_comment(author="alice", id_=2)]
        assert [c.author for c in fetch_pr_comments(client, 3, author="alice")] == ["alice"]

    def test_github_error_gives_empty(self, client):
        client.get_review_comments.side_effect = GithubException(404, {"message": "Not Found"}, None)
        assert fetch_pr_comments(client, 3) == []


class TestCollectComments:
    def test_explicit_prs(self, client):
        client.get_review_comments.side_effect = lambda n: [raw_comment(id_=n)]
        comments = collect_comments(client, pr_numbers=[1, 2])
        assert [c.pr_number for c in comments] == [1, 2]
        client.get_pulls_updated_between.assert_not_called()

    def test_by_date_range(self, client):
        since = datetime(2024, 1, 1, tzinfo=timezone.utc)
        until = datetime(2024, 2, 1, tzinfo=timezone.utc)
        client.get_pulls_updated_between.return_value = [SimpleNamespace(number=4)]
        client.get_review_comments.return_value = [raw_comment()]

        comments = collect_comments(client, since, until)

        client.get_pulls_updated_between.assert_called_once_with(since, until)
        assert [c.pr_number for c in comments] == [4]

    def test_since_required(self, client):
        with pytest.raises(ValueError):
            collect_comments(client)


class TestWriteCsv:
    def test_writes_header_and_rows(self, tmp_path):
        comment = ExportedComment(
            date="2024-05-01T10:00:00Z",
            author="bot",
            repository="octo/demo",
            pr_number=3,
            category=["Useful", "Noisy"],
            comment="Line one,\nline two",
            comment_link="https://example.com/c/1",
        )
        path = write_csv([comment], tmp_path / "out.csv")

        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == CSV_HEADER
        assert rows[1] == [
            "2024-05-01T10:00:00Z",
            "bot",
            "octo/demo",
            "3",
            "Useful,Noisy",
            "Line one,\nline two",
            "https://example.com/c/1",
        ]

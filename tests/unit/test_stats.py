"""Tests for cache statistics."""

from app.models.cache import CacheEntry
from app.services.cache import CacheStatsService
from tests.fakes import ORIGIN


def _entry(url: str, body: bytes, content_type: str = "text/html") -> CacheEntry:
    return CacheEntry(
        method="GET",
        url=url,
        status=200,
        status_text="OK",
        headers={"content-type": content_type},
        body=body,
        response_type="basic",
    )


def _seed(repo):
    repo.create_bucket("kilalo-cache-v1")
    repo.put_entries(
        "kilalo-cache-v1",
        [
            _entry(f"{ORIGIN}/", b"12345"),
            _entry(f"{ORIGIN}/en", b"123"),
            _entry(f"{ORIGIN}/main.css", b"1234567890", "text/css"),
            _entry("https://cdn.sanity.io/images/foo.png", b"12", "image/png"),
        ],
    )
    repo.create_bucket("empty")


class TestSummaries:
    def test_counts_and_sizes(self, repo):
        _seed(repo)
        stats = CacheStatsService(repo=repo)

        summaries = stats.summaries()
        assert [s.name for s in summaries] == ["kilalo-cache-v1", "empty"]
        assert summaries[0].entries == 4
        assert summaries[0].total_bytes == 20
        assert summaries[1].entries == 0
        assert summaries[1].total_bytes == 0

    def test_bucket_detail(self, repo):
        _seed(repo)
        summary = CacheStatsService(repo=repo).bucket("kilalo-cache-v1")
        assert summary.urls[0] == f"{ORIGIN}/"
        assert len(summary.urls) == 4

    def test_missing_bucket(self, repo):
        assert CacheStatsService(repo=repo).bucket("nope") is None


class TestByKind:
    def test_groups_by_kind(self, repo):
        _seed(repo)
        kinds = CacheStatsService(repo=repo).by_kind("kilalo-cache-v1")

        assert kinds == [
            {"kind": "page", "entries": 2, "bytes": 8},
            {"kind": "remote", "entries": 1, "bytes": 2},
            {"kind": "stylesheet", "entries": 1, "bytes": 10},
        ]

    def test_empty(self, repo):
        _seed(repo)
        assert CacheStatsService(repo=repo).by_kind("empty") == []

    def test_frame(self, repo):
        _seed(repo)
        df = CacheStatsService(repo=repo).frame()
        assert df.height == 4
        assert set(df["content_type"].to_list()) == {"text/html", "text/css", "image/png"}

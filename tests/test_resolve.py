"""Tests for version resolution."""

import pytest

import grrsetup.errors
import grrsetup.github
import grrsetup.resolve


def test_explicit_version_skips_network(monkeypatch) -> None:
    """Explicit tags are returned unchanged without querying GitHub."""

    def fake_get_latest_tag(self, repo: str) -> str:
        raise AssertionError("release index must not be queried")

    monkeypatch.setattr(
        grrsetup.github.GitHubClient, "get_latest_tag", fake_get_latest_tag
    )
    client = grrsetup.github.GitHubClient(token=None)
    version = grrsetup.resolve.resolve_version("v1.2.3", client, "grafana/grizzly")
    assert version == "v1.2.3"


def test_unknown_version_is_not_validated(monkeypatch) -> None:
    """Nonexistent tags pass through; the download reports them."""
    monkeypatch.setattr(
        grrsetup.github.GitHubClient,
        "get_latest_tag",
        lambda self, repo: pytest.fail("unexpected query"),
    )
    client = grrsetup.github.GitHubClient(token=None)
    assert (
        grrsetup.resolve.resolve_version("not-a-tag", client, "grafana/grizzly")
        == "not-a-tag"
    )


def test_latest_queries_index_once(monkeypatch) -> None:
    """'latest' resolves to the release index tag with a single query."""
    calls: list[str] = []

    def fake_get_latest_tag(self, repo: str) -> str:
        calls.append(repo)
        return "v0.4.2"

    monkeypatch.setattr(
        grrsetup.github.GitHubClient, "get_latest_tag", fake_get_latest_tag
    )
    client = grrsetup.github.GitHubClient(token=None)
    version = grrsetup.resolve.resolve_version("latest", client, "grafana/grizzly")
    assert version == "v0.4.2"
    assert calls == ["grafana/grizzly"]


def test_latest_failure_propagates(monkeypatch) -> None:
    """Resolution errors are not swallowed."""

    def fake_get_latest_tag(self, repo: str) -> str:
        raise grrsetup.errors.ResolutionError(message="boom")

    monkeypatch.setattr(
        grrsetup.github.GitHubClient, "get_latest_tag", fake_get_latest_tag
    )
    client = grrsetup.github.GitHubClient(token=None)
    with pytest.raises(grrsetup.errors.ResolutionError, match="boom"):
        grrsetup.resolve.resolve_version("latest", client, "grafana/grizzly")

"""Tests for the GitHub API client."""

from __future__ import annotations

import httpx
import pytest

from org_stats.github.client import GitHubClient, RemoteError


def _commit(i: int) -> dict:
    return {
        "sha": f"sha{i}",
        "html_url": f"https://github.com/org/repo/commit/sha{i}",
        "commit": {
            "author": {"name": "Alice", "email": "alice@example.com", "date": "2024-01-01T00:00:00Z"},
            "committer": {"name": "Alice", "email": "alice@example.com", "date": "2024-01-01T00:00:00Z"},
            "message": "fix things",
        },
    }


def _make_client(handler) -> GitHubClient:
    return GitHubClient("fake-token", "org", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_request_sends_bearer_token():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"login": "org"})

    async with _make_client(handler) as client:
        org = await client.get_organization()

    assert org == {"login": "org"}
    assert seen[0].headers["Authorization"] == "Bearer fake-token"
    assert seen[0].url.path == "/orgs/org"


@pytest.mark.asyncio
async def test_get_organization_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    async with _make_client(handler) as client:
        with pytest.raises(RemoteError) as exc_info:
            await client.get_organization()

    assert exc_info.value.status == 404
    assert exc_info.value.reason == "Not Found"


@pytest.mark.asyncio
async def test_pagination_stops_on_short_page():
    pages = []

    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        pages.append(page)
        assert request.url.params["per_page"] == "100"
        size = 100 if page < 3 else 30
        repos = [
            {"id": page * 1000 + i, "name": f"r{page}-{i}", "full_name": f"org/r{page}-{i}"}
            for i in range(size)
        ]
        return httpx.Response(200, json=repos)

    async with _make_client(handler) as client:
        repos = await client.list_repositories()

    assert pages == [1, 2, 3]
    assert len(repos) == 230
    assert repos[0].name == "r1-0"


@pytest.mark.asyncio
async def test_pagination_exactly_full_final_page_costs_one_empty_request():
    pages = []

    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        pages.append(page)
        return httpx.Response(200, json=[_commit(i) for i in range(100)] if page == 1 else [])

    async with _make_client(handler) as client:
        commits = await client.list_commits("repo")

    assert pages == [1, 2]
    assert len(commits) == 100


@pytest.mark.asyncio
async def test_commit_pagination_capped_at_ten_pages():
    pages = []

    def handler(request: httpx.Request) -> httpx.Response:
        pages.append(int(request.url.params["page"]))
        return httpx.Response(200, json=[_commit(i) for i in range(100)])

    async with _make_client(handler) as client:
        commits = await client.list_commits("repo", branch="develop")

    assert pages == list(range(1, 11))
    assert len(commits) == 1000
    assert commits[0].repository == "repo"
    assert commits[0].author.email == "alice@example.com"


@pytest.mark.asyncio
async def test_commit_request_uses_branch():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["sha"] == "develop"
        return httpx.Response(200, json=[])

    async with _make_client(handler) as client:
        assert await client.list_commits("repo", branch="develop") == []


@pytest.mark.asyncio
async def test_pull_request_pagination_capped_at_five_pages():
    pages = []

    def handler(request: httpx.Request) -> httpx.Response:
        pages.append(int(request.url.params["page"]))
        assert request.url.params["state"] == "all"
        prs = [
            {"id": i, "number": i, "title": "t", "state": "open", "user": {"login": "bob"},
             "created_at": "2024-01-01T00:00:00Z", "merged_at": None}
            for i in range(100)
        ]
        return httpx.Response(200, json=prs)

    async with _make_client(handler) as client:
        prs = await client.list_pull_requests("repo")

    assert pages == [1, 2, 3, 4, 5]
    assert len(prs) == 500


@pytest.mark.asyncio
async def test_non_critical_endpoints_default_on_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    async with _make_client(handler) as client:
        assert await client.list_commits("repo") == []
        assert await client.list_pull_requests("repo") == []
        assert await client.get_languages("repo") == {}
        assert await client.list_branches("repo") == ["main", "master"]
        assert await client.get_rate_limit() is None


@pytest.mark.asyncio
async def test_list_members_enriches_with_profile_and_falls_back():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/orgs/org/members":
            return httpx.Response(200, json=[
                {"id": 1, "login": "alice"},
                {"id": 2, "login": "bob"},
                {"id": 3, "login": "carol"},
            ])
        if request.url.path == "/users/bob":
            return httpx.Response(502)
        login = request.url.path.rsplit("/", 1)[-1]
        return httpx.Response(200, json={"id": 0, "login": login, "email": f"{login}@example.com"})

    async with _make_client(handler) as client:
        members = await client.list_members()

    assert [m.login for m in members] == ["alice", "bob", "carol"]
    assert members[0].email == "alice@example.com"
    # Listing entry used when the profile request fails
    assert members[1].email is None
    assert members[1].id == 2


@pytest.mark.asyncio
async def test_validate_token():
    def ok(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"login": "me"})

    def unauthorized(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401)

    async with _make_client(ok) as client:
        assert await client.validate_token() is True
    async with _make_client(unauthorized) as client:
        assert await client.validate_token() is False


@pytest.mark.asyncio
async def test_get_tree_and_blob():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/repos/org/repo/git/trees/main":
            assert request.url.params["recursive"] == "1"
            return httpx.Response(200, json={"tree": [{"path": "a.py", "type": "blob"}]})
        if request.url.host == "blobs.example.com":
            return httpx.Response(200, json={"encoding": "base64", "content": "YQ=="})
        return httpx.Response(404)

    async with _make_client(handler) as client:
        tree = await client.get_tree("org/repo", "main")
        blob = await client.get_blob("https://blobs.example.com/blob/1")

    assert tree == [{"path": "a.py", "type": "blob"}]
    assert blob["content"] == "YQ=="


@pytest.mark.asyncio
async def test_get_rate_limit():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"resources": {"core": {"limit": 5000, "remaining": 4990, "used": 10, "reset": 1700000000}}},
            headers={"X-RateLimit-Remaining": "4990"},
        )

    async with _make_client(handler) as client:
        status = await client.get_rate_limit()
        assert client.rate_limit.remaining == 4990

    assert status.limit == 5000
    assert status.remaining == 4990
    assert status.used == 10


@pytest.mark.asyncio
async def test_non_json_body_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    async with _make_client(handler) as client:
        with pytest.raises(RemoteError) as exc_info:
            await client.get_blob("https://api.github.com/blobs/1")
        # Defaulted endpoints absorb it like any other API failure.
        assert await client.list_commits("repo") == []
        assert await client.list_pull_requests("repo") == []

    assert exc_info.value.status == 200
    assert "Invalid JSON" in exc_info.value.reason

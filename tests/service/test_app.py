"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from tests._fixtures.repo_builder import RepoBuilder
from waymark.parsers import ParseFn
from waymark.service import create_app


def _client(repo_builder: RepoBuilder, parse: ParseFn | None) -> TestClient:
    config = repo_builder.config()
    return TestClient(create_app(lambda: config, parse=parse))


def test_health_endpoint(repo_builder: RepoBuilder, fake_parse: ParseFn) -> None:
    response = _client(repo_builder, fake_parse).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_check_endpoint_reports_issues(repo_builder: RepoBuilder, fake_parse: ParseFn) -> None:
    repo_builder.write(
        {
            "a.ts": "// tldr ::: first ref:#auth/core\n",
            "b.ts": "// tldr ::: second ref:#auth/core\n",
        }
    )

    response = _client(repo_builder, fake_parse).post("/check", json={"paths": []})

    assert response.status_code == 200
    payload = response.json()
    assert payload["passed"] is False
    assert [issue["rule"] for issue in payload["issues"]] == ["duplicate-canonical"]


def test_check_endpoint_maps_tooling_failure_to_400(repo_builder: RepoBuilder) -> None:
    repo_builder.write({".waymark.yml": "parser: waymark_missing_module_xyz:parse\n", "a.ts": "x\n"})

    response = _client(repo_builder, None).post("/check", json={})

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Check failed:")


def test_insertion_point_endpoint(repo_builder: RepoBuilder, fake_parse: ParseFn) -> None:
    client = _client(repo_builder, fake_parse)

    found = client.post(
        "/insertion-point",
        json={"content": "#!/usr/bin/env python3\nprint(1)\n", "language": "python"},
    )
    existing = client.post(
        "/insertion-point",
        json={"content": "# tldr ::: already here\n", "language": "python"},
    )

    assert found.json() == {"line": 2}
    assert existing.json() == {"line": None}


def test_docstring_endpoint(repo_builder: RepoBuilder, fake_parse: ParseFn) -> None:
    client = _client(repo_builder, fake_parse)

    found = client.post(
        "/docstring", json={"content": '"""Module summary.\n\nMore."""\n', "language": "python"}
    )
    missing = client.post("/docstring", json={"content": "x = 1\n", "language": "python"})

    assert found.status_code == 200
    assert found.json()["summary"] == "Module summary."
    assert found.json()["docstring"]["kind"] == "file"
    assert missing.json() == {"docstring": None, "summary": None}


def test_seed_endpoint(repo_builder: RepoBuilder, fake_parse: ParseFn) -> None:
    repo_builder.write({"a.py": '"""Alpha module."""\n', "b.go": "// TODO: retire this tool\npackage main\n"})

    response = _client(repo_builder, fake_parse).post("/seed", json={"all": True})

    assert response.status_code == 200
    payload = response.json()
    assert [candidate["file"] for candidate in payload["candidates"]] == ["a.py", "b.go"]
    assert payload["summary"]["by_source"] == {"docstrings": 1, "codetags": 1}

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from taskorder.api.main import create_app

PROCESS_URL = "/api/jobs/process"

EXAMPLE_JOB = {
    "tasks": [
        {"name": "task-1", "command": "touch /tmp/file1"},
        {"name": "task-2", "command": "cat /tmp/file1", "requires": ["task-3"]},
        {"name": "task-3", "command": "echo 'Hello World!' > /tmp/file1", "requires": ["task-1"]},
        {"name": "task-4", "command": "rm /tmp/file1", "requires": ["task-2", "task-3"]},
    ]
}


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app())


def test_processes_valid_job(client: TestClient) -> None:
    r = client.post(PROCESS_URL, json=EXAMPLE_JOB)

    assert r.status_code == 200
    tasks = r.json()["tasks"]
    assert [t["name"] for t in tasks] == ["task-1", "task-3", "task-2", "task-4"]
    assert set(tasks[0]) == {"name", "command"}


def test_json_is_default_format(client: TestClient) -> None:
    r = client.post(PROCESS_URL, json={"tasks": [{"name": "a", "command": "echo a"}]})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")


def test_empty_requires_and_empty_job(client: TestClient) -> None:
    r = client.post(
        PROCESS_URL,
        json={
            "tasks": [
                {"name": "task-1", "command": "echo 1", "requires": []},
                {"name": "task-2", "command": "echo 2", "requires": ["task-1"]},
            ]
        },
    )
    assert [t["name"] for t in r.json()["tasks"]] == ["task-1", "task-2"]

    r = client.post(PROCESS_URL, json={"tasks": []})
    assert r.status_code == 200
    assert r.json() == {"tasks": []}


def test_bash_format_via_query(client: TestClient) -> None:
    r = client.post(PROCESS_URL + "?format=bash", json=EXAMPLE_JOB)

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/x-shellscript")
    assert r.text.split("\n") == [
        "#!/usr/bin/env bash",
        "touch /tmp/file1",
        "echo 'Hello World!' > /tmp/file1",
        "cat /tmp/file1",
        "rm /tmp/file1",
        "",
    ]


def test_bash_format_via_accept_header(client: TestClient) -> None:
    r = client.post(
        PROCESS_URL,
        json={"tasks": [{"name": "a", "command": "echo hello"}]},
        headers={"Accept": "Text/X-ShellScript"},
    )

    assert r.status_code == 200
    assert r.text == "#!/usr/bin/env bash\necho hello\n"


def test_query_format_overrides_accept_header(client: TestClient) -> None:
    r = client.post(
        PROCESS_URL + "?format=json",
        json={"tasks": [{"name": "a", "command": "echo hello"}]},
        headers={"Accept": "text/x-shellscript"},
    )

    assert r.json() == {"tasks": [{"name": "a", "command": "echo hello"}]}


@pytest.mark.parametrize("body", [{}, {"invalid": "data"}, ["task-1"]])
def test_missing_tasks_is_invalid_request(client: TestClient, body) -> None:
    r = client.post(PROCESS_URL, json=body)

    assert r.status_code == 400
    assert r.json() == {
        "error": "invalid_request",
        "message": "invalid job data: tasks field is required",
    }


def test_malformed_json_is_invalid_request(client: TestClient) -> None:
    r = client.post(PROCESS_URL, content=b"{not json", headers={"Content-Type": "application/json"})

    assert r.status_code == 400
    assert r.json()["error"] == "invalid_request"


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ({"tasks": "not-a-list"}, "tasks must be a list"),
        ({"tasks": [{"command": "echo hello"}]}, "name is required"),
        ({"tasks": [{"name": "task-1"}]}, "command is required"),
        ({"tasks": [{"name": "t", "command": "c", "requires": "x"}]}, "requires must be a list"),
        ({"tasks": [{"name": "t", "command": "c", "requires": [1]}]}, "requires must contain only strings"),
    ],
)
def test_validation_errors(client: TestClient, body, message: str) -> None:
    r = client.post(PROCESS_URL, json=body)

    assert r.status_code == 400
    assert r.json() == {"error": "validation_error", "message": message}


def test_missing_reference_is_unprocessable(client: TestClient) -> None:
    r = client.post(
        PROCESS_URL,
        json={"tasks": [{"name": "task-1", "command": "echo 1", "requires": ["missing-task"]}]},
    )

    assert r.status_code == 422
    assert r.json() == {
        "error": "missing_task_reference",
        "message": "task 'missing-task' is referenced but does not exist",
    }


@pytest.mark.parametrize(
    "tasks",
    [
        [
            {"name": "task-1", "command": "echo 1", "requires": ["task-2"]},
            {"name": "task-2", "command": "echo 2", "requires": ["task-1"]},
        ],
        [{"name": "task-1", "command": "echo 1", "requires": ["task-1"]}],
    ],
)
def test_circular_dependency_is_unprocessable(client: TestClient, tasks) -> None:
    r = client.post(PROCESS_URL, json={"tasks": tasks})

    assert r.status_code == 422
    assert r.json()["error"] == "circular_dependency"
    assert "circular dependency" in r.json()["message"]


def test_duplicate_names_are_unprocessable(client: TestClient) -> None:
    r = client.post(
        PROCESS_URL,
        json={"tasks": [{"name": "a", "command": "1"}, {"name": "a", "command": "2"}]},
    )

    assert r.status_code == 422
    assert r.json()["error"] == "duplicate_task_name"


def test_errors_ignore_bash_format(client: TestClient) -> None:
    r = client.post(PROCESS_URL + "?format=bash", json={"tasks": [{"name": "a"}]})

    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"


def test_unknown_route_renders_not_found(client: TestClient) -> None:
    r = client.get("/nope")

    assert r.status_code == 404
    assert r.json() == {"errors": {"detail": "Not Found"}}

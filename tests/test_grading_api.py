"""Tests for the grading API routes."""

from __future__ import annotations

import typing as t

from fastapi.testclient import TestClient


class TestEvaluations(object):
    """Tests for POST /api/evaluations."""

    def test_evaluate_text(self, client: TestClient, xml_grader: dict[str, t.Any]) -> None:
        """A raw response is graded and returned with camelCase keys."""
        response = client.post(
            "/api/evaluations",
            json={"response": "<city>Paris</city><population>7</population>", "graders": [xml_grader]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["percentageScore"] == 50.0
        assert data["maxScore"] == 1.0
        assert data["passed"] is False
        (grader,) = data["graderResults"]
        assert grader["graderName"] == "Answer fields"
        assert [d["passed"] for d in grader["details"]] == [True, False]

    def test_evaluate_form(self, client: TestClient, xml_grader: dict[str, t.Any]) -> None:
        """Form payloads are rendered before grading."""
        response = client.post(
            "/api/evaluations",
            json={
                "response": {"kind": "form", "values": {"city": "Paris", "population": 2500000}},
                "graders": [xml_grader],
            },
        )

        assert response.status_code == 200
        assert response.json()["percentageScore"] == 100.0

    def test_misconfigured_grader(self, client: TestClient) -> None:
        """Configuration errors are 422s naming the grader."""
        response = client.post(
            "/api/evaluations",
            json={"response": "x", "graders": [{"type": "xml", "name": "empty"}]},
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "graders[0] ('empty'): xml grader declares no structure"

    def test_response_too_long(self, client: TestClient) -> None:
        """Responses beyond the configured limit are refused."""
        response = client.post(
            "/api/evaluations",
            json={"response": "x" * 5001, "graders": [{"type": "text", "config": {"expected": "x"}}]},
        )

        assert response.status_code == 413

    def test_float_overflow_is_a_coercion_failure(self, client: TestClient) -> None:
        """A float answer too large to represent fails its field and still returns JSON."""
        grader = {
            "type": "xml",
            "name": "Estimate",
            "config": {
                "structure": [
                    {
                        "id": "x",
                        "name": "x",
                        "type": "float",
                        "comparator": {"type": "range", "config": {"min": 0, "max": 10}},
                    }
                ]
            },
        }
        response = client.post("/api/evaluations", json={"response": "<x>1e999</x>", "graders": [grader]})

        assert response.status_code == 200
        data = response.json()
        assert data["percentageScore"] == 0.0
        (detail,) = data["graderResults"][0]["details"]
        assert detail["raw"] == "1e999"
        assert detail["actual"] is None
        assert detail["failure"] == "coercion_failed"
        assert detail["passed"] is False


class TestGraders(object):
    """Tests for the grader export and populate routes."""

    def test_export(self, client: TestClient, xml_grader: dict[str, t.Any]) -> None:
        """Exported graders have no expected answers."""
        response = client.post("/api/graders/export", json={"graders": [xml_grader]})

        assert response.status_code == 200
        (grader,) = response.json()["graders"]
        assert grader["config"]["structure"][0]["comparator"]["config"]["expected"] is None

    def test_populate(self, client: TestClient, xml_grader: dict[str, t.Any]) -> None:
        """Reviewed values become expected answers."""
        response = client.post(
            "/api/graders/populate",
            json={"graders": [xml_grader], "values": {"city": "Rome", "population": "2800000"}},
        )

        assert response.status_code == 200
        (grader,) = response.json()["graders"]
        city, population = grader["config"]["structure"]
        assert city["comparator"]["config"]["expected"] == "Rome"
        assert population["comparator"]["config"]["expected"] == 2800000


class TestValidateTasks(object):
    """Tests for POST /api/tasks/validate."""

    def test_valid(self, client: TestClient, xml_grader: dict[str, t.Any]) -> None:
        """A well-formed bundle reports is_valid."""
        response = client.post(
            "/api/tasks/validate",
            json={"tasks": [{"name": "n", "prompt": "p", "graders": [xml_grader]}]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is True
        assert data["task_count"] == 1

    def test_strict(self, client: TestClient) -> None:
        """Warnings block import in strict mode."""
        bundle = {"tasks": [{"name": "n", "prompt": "p", "graders": [{"type": "text", "name": "t", "weight": 1}]}]}

        lenient = client.post("/api/tasks/validate", json=bundle)
        strict = client.post("/api/tasks/validate", params={"strict": True}, json=bundle)

        assert lenient.json()["is_valid"] is True
        assert lenient.json()["warning_count"] == 1
        assert strict.json()["is_valid"] is False

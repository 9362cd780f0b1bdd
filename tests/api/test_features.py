"""
Test suite for the feature endpoints.

A stub provider is injected through create_app so every test controls the
raw provider text: well-formed JSON, prose that forces the fallback, or a
ProviderError.
"""

import io
import json
from datetime import date, timedelta

import pytest

from study_assistant.errors import ProviderError
from study_assistant.schemas import CodeReviewResult, DiagramResult, NotesResult, StudyPlanResult


def _txt_upload(text: str = "Cells divide by mitosis. Genes carry traits.", name: str = "notes.txt"):
    return {"file": (name, io.BytesIO(text.encode()), "text/plain")}


def _exam_date(days: int) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


class TestDiagram:
    def test_empty_prompt_is_rejected_without_provider_call(self, client, stub):
        response = client.post("/api/diagram/generate", json={"prompt": "   "})
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert stub.prompts == []

    def test_missing_prompt_is_rejected(self, client):
        response = client.post("/api/diagram/generate", json={})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_provider_json_is_returned(self, client, stub):
        stub.reply = "```json\n" + json.dumps({
            "mermaidCode": "```mermaid\nflowchart TD\n  A[Rain] --> B[River]\n```",
            "diagramType": "flowchart",
            "title": "Water cycle",
            "explanation": "Rain flows into rivers.",
        }) + "\n```"
        response = client.post("/api/diagram/generate", json={"prompt": "water cycle"})
        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["mermaidCode"] == "flowchart TD\n  A[Rain] --> B[River]"
        assert body["title"] == "Water cycle"

    def test_prose_falls_back_to_flowchart(self, client, stub):
        stub.reply = "Here is a diagram: A goes to B."
        body = client.post("/api/diagram/generate", json={"prompt": "plan, build, ship"}).json()
        assert body["success"] is True
        assert body["mermaidCode"].startswith("flowchart TD")
        DiagramResult.model_validate(body)


class TestCodeReview:
    def test_prose_reply_returns_fallback_review(self, client, stub):
        stub.reply = "Your code looks fine overall, nice work!"
        response = client.post(
            "/api/reviewer/review", json={"code": "function f(){ return 1 }", "language": "javascript"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert isinstance(body["review"]["overallScore"], (int, float))
        assert 0 <= body["review"]["overallScore"] <= 100
        assert len(body["review"]["issues"]) >= 1
        CodeReviewResult.model_validate(body["review"])

    def test_provider_review_is_normalized(self, client, stub, review_payload):
        stub.reply = "Review:\n" + json.dumps(review_payload)
        body = client.post("/api/reviewer/review", json={"code": "let a = 1", "language": "javascript"}).json()
        assert body["review"]["overallScore"] == 88
        assert body["review"]["issues"][0]["message"] == "Missing semicolon"
        assert "let a = 1" in stub.prompts[0]

    @pytest.mark.parametrize("payload", [{"code": "", "language": "python"}, {"code": "x = 1", "language": " "}])
    def test_missing_fields(self, client, stub, payload):
        response = client.post("/api/reviewer/review", json=payload)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": response.json()["error"]}
        assert stub.prompts == []

    def test_nan_metric_falls_back(self, client, stub, review_payload):
        stub.reply = json.dumps(review_payload)[:-1] + ', "metrics": {"complexity": NaN}}'
        response = client.post("/api/reviewer/review", json={"code": "x = 1", "language": "python"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        CodeReviewResult.model_validate(body["review"])

    def test_provider_error_maps_to_500(self, client, stub, provider_down):
        stub.reply = provider_down
        response = client.post("/api/reviewer/review", json={"code": "x = 1", "language": "python"})
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Failed to review code"
        assert "details" in body


class TestNotes:
    def test_process_text_with_provider_json(self, client, stub):
        stub.reply = json.dumps({
            "summary": "Mitosis splits cells.",
            "flashcards": [{"question": "What splits cells?", "answer": "Mitosis"}],
        })
        body = client.post("/api/notes/process-text", json={"text": "Cells divide by mitosis."}).json()
        assert body == {
            "success": True,
            "summary": "Mitosis splits cells.",
            "flashcards": [{"question": "What splits cells?", "answer": "Mitosis"}],
        }

    @pytest.mark.parametrize("reply", ["", "no braces at all", '{"summary": "x", "flashcards": [ }'])
    def test_malformed_reply_is_transparent(self, client, stub, reply):
        stub.reply = reply
        response = client.post("/api/notes/process-text", json={"text": "Cells divide by mitosis. Genes carry traits."})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        NotesResult.model_validate(body)
        assert len(body["flashcards"]) >= 1

    def test_deeply_nested_reply_falls_back(self, client, stub):
        stub.reply = '{"summary": "s", "flashcards": ' + "[" * 100000 + "}"
        response = client.post("/api/notes/process-text", json={"text": "Cells divide by mitosis. Genes carry traits."})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        NotesResult.model_validate(body)

    def test_empty_text(self, client):
        response = client.post("/api/notes/process-text", json={"text": ""})
        assert response.status_code == 400

    def test_text_too_long(self, client, stub):
        response = client.post("/api/notes/process-text", json={"text": "a" * 50001})
        assert response.status_code == 400
        assert stub.prompts == []

    def test_process_file(self, client, stub):
        stub.reply = "not json"
        response = client.post("/api/notes/process", files=_txt_upload())
        assert response.status_code == 200
        body = response.json()
        assert body["originalText"].startswith("Cells divide by mitosis.")
        assert body["fileName"] == "notes.txt"
        assert "Cells divide by mitosis." in stub.prompts[0]

    def test_process_requires_file(self, client):
        response = client.post("/api/notes/process")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_rejects_unsupported_file_type(self, client, stub):
        files = {"file": ("image.png", io.BytesIO(b"\x89PNG"), "image/png")}
        response = client.post("/api/notes/process", files=files)
        assert response.status_code == 400
        assert "Invalid file type" in response.json()["error"]
        assert stub.prompts == []

    def test_rejects_oversized_file(self, client, monkeypatch):
        from study_assistant import extraction

        monkeypatch.setattr(extraction.settings, "max_upload_bytes", 16)
        response = client.post("/api/notes/process", files=_txt_upload("x" * 64))
        assert response.status_code == 400
        assert "File too large" in response.json()["error"]

    def test_empty_file(self, client):
        response = client.post("/api/notes/process", files=_txt_upload("   "))
        assert response.status_code == 400


class TestStudyPlanner:
    def _post(self, client, **overrides):
        data = {"examDate": _exam_date(10), "studyHours": "3", "difficulty": "medium"}
        data.update(overrides)
        return client.post("/api/planner/create-plan", data=data, files=_txt_upload())

    def test_fallback_plan_for_prose_reply(self, client, stub):
        stub.reply = "I'd suggest studying a bit every day."
        response = self._post(client)
        assert response.status_code == 200
        plan = response.json()["studyPlan"]
        StudyPlanResult.model_validate(plan)
        hours = [subject["hours"] for subject in plan["subjects"]]
        assert abs(sum(hours) - 30) <= 1
        assert hours[0] == 12
        assert plan["daysUntilExam"] == 10
        assert plan["totalHours"] == 30
        assert plan["fileName"] == "notes.txt"

    def test_provider_plan_is_kept(self, client, stub, study_plan_payload):
        stub.reply = "```json\n" + json.dumps(study_plan_payload) + "\n```"
        plan = self._post(client).json()["studyPlan"]
        assert [s["name"] for s in plan["subjects"]] == ["Cell Biology", "Genetics"]
        assert plan["difficulty"] == "medium"
        assert "Cells divide by mitosis." in stub.prompts[0]

    def test_infinite_hours_fall_back(self, client, stub):
        stub.reply = '{"subjects": [{"name": "Genetics", "hours": Infinity}], "weeklySchedule": []}'
        response = self._post(client)
        assert response.status_code == 200
        plan = response.json()["studyPlan"]
        StudyPlanResult.model_validate(plan)
        assert all(subject["name"] != "Genetics" for subject in plan["subjects"])

    def test_exam_date_at_horizon_is_accepted(self, client, stub):
        stub.reply = "no plan"
        response = self._post(client, examDate=_exam_date(730))
        assert response.status_code == 200
        assert response.json()["studyPlan"]["daysUntilExam"] == 730

    def test_requires_file(self, client, stub):
        response = client.post(
            "/api/planner/create-plan", data={"examDate": _exam_date(5), "studyHours": "2"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "File is required for study plan generation"
        assert stub.prompts == []

    @pytest.mark.parametrize(
        "overrides,error",
        [
            ({"examDate": ""}, "Exam date is required"),
            ({"studyHours": ""}, "Daily study hours are required"),
            ({"examDate": _exam_date(0)}, "Exam date must be in the future"),
            ({"examDate": "next tuesday"}, "Exam date must be a valid date (YYYY-MM-DD)"),
            ({"studyHours": "lots"}, "Daily study hours must be a number"),
            ({"studyHours": "30"}, "Daily study hours must be between 0 and 24"),
            ({"difficulty": "brutal"}, "Difficulty must be one of easy, medium, hard"),
            ({"examDate": _exam_date(731)}, "Exam date must be within 730 days"),
            ({"examDate": "9999-12-31"}, "Exam date must be within 730 days"),
        ],
    )
    def test_validation(self, client, stub, overrides, error):
        response = self._post(client, **overrides)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": error}
        assert stub.prompts == []

    def test_provider_error(self, client, stub, provider_down):
        stub.reply = provider_down
        response = self._post(client)
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to generate study plan"

    def test_progress_stubs(self, client):
        assert client.get("/api/planner/progress/plan-1").json()["progress"]["planId"] == "plan-1"
        body = client.post("/api/planner/progress/plan-1", json={"completedHours": 4, "currentWeek": 2}).json()
        assert body["updatedProgress"]["completedHours"] == 4
        assert body["updatedProgress"]["currentWeek"] == 2

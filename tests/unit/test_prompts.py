"""
Tests for prompt rendering: budgets, JSON directives and determinism.
"""

from datetime import date

from study_assistant.prompts import (
    CODE_REVIEW_BUDGET,
    STUDY_PLAN_CONTENT_BUDGET,
    TRUNCATION_MARKER,
    build_chat_prompt,
    build_code_review_prompt,
    build_diagram_prompt,
    build_notes_prompt,
    build_study_plan_prompt,
    truncate,
)
from study_assistant.schemas import ChatTurn


def test_truncate_marks_cut_content():
    assert truncate("short", 10) == "short"
    cut = truncate("x" * 20, 10)
    assert cut == "x" * 10 + TRUNCATION_MARKER


def test_study_plan_prompt_is_deterministic_and_bounded():
    kwargs = dict(days_until_exam=10, daily_hours=3, difficulty="medium", today=date(2026, 1, 5))
    content = "y" * (STUDY_PLAN_CONTENT_BUDGET * 2)
    first = build_study_plan_prompt(content, **kwargs)
    assert first == build_study_plan_prompt(content, **kwargs)
    assert "y" * (STUDY_PLAN_CONTENT_BUDGET + 1) not in first
    assert "Total available study hours: 30" in first
    assert "2026-01-05" in first
    assert "Return ONLY valid JSON" in first


def test_code_review_prompt_truncates_code():
    prompt = build_code_review_prompt("z" * (CODE_REVIEW_BUDGET + 50), "python")
    assert "z" * (CODE_REVIEW_BUDGET + 1) not in prompt
    assert '"overallScore"' in prompt


def test_diagram_prompt_defaults_unknown_type_to_flowchart():
    prompt = build_diagram_prompt("water cycle", "hologram")
    assert "Create a flowchart diagram" in prompt
    assert "water cycle" in prompt


def test_notes_prompt_requests_flashcards():
    assert '"flashcards"' in build_notes_prompt("Some notes.")


def test_chat_prompt_includes_recent_history():
    history = [ChatTurn(role="user", content="What is DNA?"), ChatTurn(role="assistant", content="A molecule.")]
    prompt = build_chat_prompt("And RNA?", history)
    assert "Student: What is DNA?" in prompt
    assert "Assistant: A molecule." in prompt
    assert prompt.endswith("Student question: And RNA?")

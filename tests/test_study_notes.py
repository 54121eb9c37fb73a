"""Tests for the notes generator client (Groq call is faked)."""
import json

import pytest

from conftest import notes_payload
from core.errors import ResponseMalformed
from features import study_notes
from features.study_notes import SYSTEM_PROMPT, generate_study_notes, parse_study_notes


def _fake_groq(reply: str, calls: list):
    def fake(messages, **kwargs):
        calls.append((messages, kwargs))
        return reply
    return fake


def test_generate_sends_single_json_request(monkeypatch):
    calls = []
    monkeypatch.setattr(study_notes, "groq_chat", _fake_groq(json.dumps(notes_payload()), calls))

    notes = generate_study_notes("Photosynthesis converts light into chemical energy.")

    assert notes.topic_overview == "Photosynthesis"
    assert len(notes.study_questions.mcqs) == 3
    assert notes.study_questions.exam_style.model_answer.startswith("Chlorophyll")
    assert len(calls) == 1
    messages, kwargs = calls[0]
    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert messages[1] == {"role": "user", "content": "Photosynthesis converts light into chemical energy."}
    assert kwargs["json_mode"] is True


def test_system_prompt_carries_rules_and_schema():
    assert "teaching a student for the first time" in SYSTEM_PROMPT
    assert "exactly 3 multiple choice questions" in SYSTEM_PROMPT
    assert "exactly 3 short answer questions" in SYSTEM_PROMPT
    for key in ("topicOverview", "commonMistakes", "shortAnswers", "examStyle", "modelAnswer"):
        assert key in SYSTEM_PROMPT


def test_non_json_response_is_malformed(monkeypatch):
    monkeypatch.setattr(study_notes, "groq_chat", _fake_groq("Sure! Here are your notes:", []))
    with pytest.raises(ResponseMalformed) as exc:
        generate_study_notes("Some text")
    assert "shorter content" in str(exc.value)
    assert exc.value.code == "response_malformed"


def test_missing_nested_field_is_malformed():
    payload = notes_payload()
    del payload["studyQuestions"]["examStyle"]["modelAnswer"]
    with pytest.raises(ResponseMalformed):
        parse_study_notes(json.dumps(payload))


def test_mistyped_field_is_malformed():
    payload = notes_payload()
    payload["keyPoints"] = "not a list"
    with pytest.raises(ResponseMalformed):
        parse_study_notes(json.dumps(payload))


def test_empty_response_is_malformed():
    with pytest.raises(ResponseMalformed):
        parse_study_notes("")


def test_transport_errors_propagate_unchanged(monkeypatch):
    def boom(messages, **kwargs):
        raise ConnectionError("network down")

    monkeypatch.setattr(study_notes, "groq_chat", boom)
    with pytest.raises(ConnectionError):
        generate_study_notes("Some text")


def test_paragraphs_split_on_blank_lines():
    notes = parse_study_notes(json.dumps(notes_payload()))
    assert notes.paragraphs() == ["Plants capture light.", "They store it as sugar."]

"""
Turns raw study material into a structured StudyNotes pack.
The response is validated against the StudyNotes schema and fails closed.
"""
import json
import logging

from pydantic import ValidationError

from core.errors import ResponseMalformed
from core.groq_client import groq_chat
from core.schemas import StudyNotes

logger = logging.getLogger(__name__)

RESPONSE_SCHEMA = StudyNotes.model_json_schema(by_alias=True)

SYSTEM_PROMPT = f"""You are an intelligent academic study assistant. Transform the provided content into structured study notes.

STRICT PEDAGOGICAL RULES:
- Explain concepts as if teaching a student for the first time.
- Use clear, simple, and precise language. Avoid unnecessary jargon.
- Define technical terms clearly.
- Keep explanations accurate and aligned with standard academic understanding.

STRUCTURE REQUIREMENTS (JSON):
1. topicOverview: Brief explanation of the topic and its importance.
2. detailedExplanation: Step-by-step breakdown using simple sentences. Separate paragraphs with a blank line.
3. keyPoints: List of essential definitions, facts, and processes.
4. examples: Realistic everyday or academic examples.
5. commonMistakes: Misunderstandings and their corrections.
6. examTips: Focus areas for examiners and keywords.
7. studyQuestions:
   - mcqs: exactly 3 multiple choice questions (question, options, answer). The answer must be one of the options.
   - shortAnswers: exactly 3 short answer questions (question, answer).
   - examStyle: exactly 1 exam-style question with a detailed model answer (question, modelAnswer).

Return ONLY a single JSON object that matches this JSON schema. No markdown code blocks, no preamble.

{json.dumps(RESPONSE_SCHEMA, indent=2)}"""


def parse_study_notes(raw: str) -> StudyNotes:
    try:
        return StudyNotes.model_validate_json(raw)
    except ValidationError as e:
        logger.error("Failed to parse study notes response: %s", e)
        raise ResponseMalformed() from e


def generate_study_notes(text: str) -> StudyNotes:
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": text},
    ]
    raw = groq_chat(messages, temperature=0.4, max_tokens=4096, json_mode=True)
    return parse_study_notes(raw)

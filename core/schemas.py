"""
Typed shapes for the study pack and the history entries that hold it.
Attributes are snake_case in Python; JSON (LLM responses and storage) uses camelCase.
"""
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        protected_namespaces=(),  # ExamStyleQuestion.model_answer
    )


class MultipleChoiceQuestion(CamelModel):
    question: str
    options: List[str]
    answer: str


class ShortAnswerQuestion(CamelModel):
    question: str
    answer: str


class ExamStyleQuestion(CamelModel):
    question: str
    model_answer: str


class StudyQuestions(CamelModel):
    mcqs: List[MultipleChoiceQuestion]
    short_answers: List[ShortAnswerQuestion]
    exam_style: ExamStyleQuestion


class StudyNotes(CamelModel):
    topic_overview: str
    detailed_explanation: str
    key_points: List[str]
    examples: List[str]
    common_mistakes: List[str]
    exam_tips: List[str]
    study_questions: StudyQuestions

    def paragraphs(self) -> List[str]:
        """Detailed explanation split on blank lines, empty fragments dropped."""
        return [p.strip() for p in self.detailed_explanation.split("\n\n") if p.strip()]


class NoteHistoryItem(CamelModel):
    id: str
    timestamp: int  # ms since epoch
    original_text: str
    notes: StudyNotes

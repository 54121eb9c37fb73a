"""Shared fixtures: sample study packs and throwaway key-value stores."""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
# Keep the module-level engine in core.database off the real data directory
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base, KeyValueStore
from core.schemas import StudyNotes


def notes_payload(topic: str = "Photosynthesis") -> dict:
    return {
        "topicOverview": topic,
        "detailedExplanation": "Plants capture light.\n\nThey store it as sugar.",
        "keyPoints": ["Chlorophyll absorbs light", "Glucose is produced"],
        "examples": ["A leaf in sunlight"],
        "commonMistakes": ["Plants do not eat soil; they make food from light."],
        "examTips": ["Mention chlorophyll and glucose."],
        "studyQuestions": {
            "mcqs": [
                {"question": "What absorbs light?", "options": ["Chlorophyll", "Water", "Soil"], "answer": "Chlorophyll"},
                {"question": "What gas is released?", "options": ["Oxygen", "Helium"], "answer": "Oxygen"},
                {"question": "Where does it happen?", "options": ["Chloroplast", "Nucleus"], "answer": "Chloroplast"},
            ],
            "shortAnswers": [
                {"question": "Define photosynthesis.", "answer": "Turning light into chemical energy."},
                {"question": "Name the sugar made.", "answer": "Glucose."},
                {"question": "Why is light needed?", "answer": "It powers the reaction."},
            ],
            "examStyle": {
                "question": "Explain how light becomes chemical energy.",
                "modelAnswer": "Chlorophyll absorbs light, which drives the production of glucose.",
            },
        },
    }


def make_notes(topic: str = "Photosynthesis") -> StudyNotes:
    return StudyNotes.model_validate(notes_payload(topic))


class DictStore:
    """In-memory stand-in for KeyValueStore that counts writes."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.writes = 0

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.writes += 1
        self.data[key] = value


@pytest.fixture
def dict_store():
    return DictStore()


@pytest.fixture
def sql_store(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.sqlite'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield KeyValueStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()

"""
Generation workflow: Idle -> Submitting -> Success | Failed -> Idle.

AppState is an immutable snapshot; transition() is the only way it changes.
StudyWorkflow runs the side effects (extraction, the LLM call, history writes)
and feeds their outcome back through transition().
"""
import logging
import os
import time
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Tuple

from core.errors import StudyPackError
from core.history_store import HistoryStore, prepend_capped
from core.ingestion import ingest_source
from core.schemas import NoteHistoryItem, StudyNotes
from features.study_notes import generate_study_notes

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
DEFAULT_THEME = os.environ.get("DEFAULT_THEME", "light")

LOADING_INTERVAL = 2.5  # seconds between loading messages
LOADING_MESSAGES = (
    "Reading your material...",
    "Simplifying complex language...",
    "Drafting exam questions...",
    "Clarifying cause-and-effect...",
    "Structuring your final notes...",
)

TEXT_FALLBACK_ERROR = "Analysis failed. Please try again."
FILE_FALLBACK_ERROR = "Error processing file."
TRANSPORT_FAILURE = "transport_failure"


class Phase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class AppState:
    input_text: str = ""
    notes: Optional[StudyNotes] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    phase: Phase = Phase.IDLE
    loading_step: int = 0
    theme: str = DEFAULT_THEME
    history: Tuple[NoteHistoryItem, ...] = ()

    @property
    def is_busy(self) -> bool:
        return self.phase == Phase.SUBMITTING

    @property
    def loading_message(self) -> str:
        return LOADING_MESSAGES[self.loading_step % len(LOADING_MESSAGES)]


# ── Events ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InputEdited:
    text: str


@dataclass(frozen=True)
class InputCleared:
    pass


@dataclass(frozen=True)
class GenerationRequested:
    text: str


@dataclass(frozen=True)
class DocumentRequested:
    pass


@dataclass(frozen=True)
class DocumentExtracted:
    text: str


@dataclass(frozen=True)
class GenerationSucceeded:
    item: NoteHistoryItem
    # saved history after recording item, when the store knows more than this session
    history: Optional[Tuple[NoteHistoryItem, ...]] = None


@dataclass(frozen=True)
class GenerationFailed:
    message: str
    code: str


@dataclass(frozen=True)
class LoadingTicked:
    pass


@dataclass(frozen=True)
class HistorySelected:
    item: NoteHistoryItem


@dataclass(frozen=True)
class HistoryCleared:
    pass


@dataclass(frozen=True)
class Acknowledged:
    pass


@dataclass(frozen=True)
class ThemeToggled:
    pass


# Events a user can trigger; blocked while a generation is in flight
_USER_EVENTS = (InputEdited, InputCleared, GenerationRequested, DocumentRequested, HistorySelected, HistoryCleared)


def transition(state: AppState, event) -> AppState:
    if state.is_busy and isinstance(event, _USER_EVENTS):
        return state

    if state.phase in (Phase.SUCCESS, Phase.FAILED) and isinstance(event, _USER_EVENTS + (Acknowledged, ThemeToggled)):
        state = replace(state, phase=Phase.IDLE)

    if isinstance(event, InputEdited):
        return replace(state, input_text=event.text)
    if isinstance(event, InputCleared):
        return replace(state, input_text="")
    if isinstance(event, GenerationRequested):
        if not event.text.strip():
            return state
        return replace(state, input_text=event.text, phase=Phase.SUBMITTING, error=None, error_code=None, loading_step=0)
    if isinstance(event, DocumentRequested):
        return replace(state, phase=Phase.SUBMITTING, error=None, error_code=None, loading_step=0)
    if isinstance(event, DocumentExtracted):
        return replace(state, input_text=event.text)
    if isinstance(event, LoadingTicked):
        if not state.is_busy:
            return state
        return replace(state, loading_step=(state.loading_step + 1) % len(LOADING_MESSAGES))
    if isinstance(event, GenerationSucceeded):
        return replace(
            state,
            notes=event.item.notes,
            phase=Phase.SUCCESS,
            history=event.history if event.history is not None else prepend_capped(state.history, event.item),
        )
    if isinstance(event, GenerationFailed):
        return replace(state, error=event.message, error_code=event.code, phase=Phase.FAILED)
    if isinstance(event, HistorySelected):
        return replace(state, notes=event.item.notes, input_text=event.item.original_text, error=None, error_code=None)
    if isinstance(event, HistoryCleared):
        return replace(state, history=())
    if isinstance(event, ThemeToggled):
        return replace(state, theme="light" if state.theme == "dark" else "dark")
    if isinstance(event, Acknowledged):
        return state
    raise TypeError(f"Unknown event: {event!r}")


def _failure(e: Exception, fallback: str) -> GenerationFailed:
    code = e.code if isinstance(e, StudyPackError) else TRANSPORT_FAILURE
    return GenerationFailed(message=str(e) or fallback, code=code)


class StudyWorkflow:
    def __init__(
        self,
        history: HistoryStore,
        generate: Callable[[str], StudyNotes] = generate_study_notes,
        extract: Callable[[str, bytes], str] = ingest_source,
        clock: Callable[[], float] = time.time,
        theme_store=None,
    ):
        self.history = history
        self.generate = generate
        self.extract = extract
        self.clock = clock
        self.theme_store = theme_store

    def initial_state(self) -> AppState:
        theme = DEFAULT_THEME
        if self.theme_store is not None:
            saved = self.theme_store.get(THEME_KEY)
            if saved in ("dark", "light"):
                theme = saved
        return AppState(theme=theme, history=self.history.load())

    # ── Submitting ──────────────────────────────────────────────────────────

    def begin_text(self, state: AppState, text: str) -> AppState:
        return transition(state, GenerationRequested(text))

    def begin_document(self, state: AppState) -> AppState:
        return transition(state, DocumentRequested())

    def run(self, state: AppState, fallback: str = TEXT_FALLBACK_ERROR) -> AppState:
        """Generate notes for state.input_text. Never raises."""
        if not state.is_busy:
            return state
        text = state.input_text
        try:
            notes = self.generate(text)
        except Exception as e:
            logger.warning("Study notes generation failed: %s", e)
            return transition(state, _failure(e, fallback))

        item = NoteHistoryItem(
            id=uuid.uuid4().hex,
            timestamp=int(self.clock() * 1000),
            original_text=text,
            notes=notes,
        )
        saved = self.history.record(item)
        return transition(state, GenerationSucceeded(saved[0], history=saved))

    def run_document(self, state: AppState, file_bytes: bytes, source_type: str) -> AppState:
        if not state.is_busy:
            return state
        try:
            text = self.extract(source_type, file_bytes)
        except Exception as e:
            logger.warning("Document extraction failed (%s): %s", source_type, e)
            return transition(state, _failure(e, FILE_FALLBACK_ERROR))

        state = transition(state, DocumentExtracted(text))
        return self.run(state, fallback=FILE_FALLBACK_ERROR)

    def submit_text(self, state: AppState, text: str) -> AppState:
        return self.run(self.begin_text(state, text))

    def submit_document(self, state: AppState, file_bytes: bytes, source_type: str) -> AppState:
        return self.run_document(self.begin_document(state), file_bytes, source_type)

    # ── Everything else ─────────────────────────────────────────────────────

    def select_history(self, state: AppState, item_id: str) -> AppState:
        item = next((i for i in state.history if i.id == item_id), None)
        if item is None:
            return state
        return transition(state, HistorySelected(item))

    def clear_history(self, state: AppState) -> AppState:
        if state.is_busy:
            return state
        self.history.clear()
        return transition(state, HistoryCleared())

    def toggle_theme(self, state: AppState) -> AppState:
        state = transition(state, ThemeToggled())
        if self.theme_store is not None:
            self.theme_store.set(THEME_KEY, state.theme)
        return state

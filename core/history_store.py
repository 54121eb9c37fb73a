"""
Capped, newest-first history of generated study packs.
The whole list is written back as one JSON snapshot on every change.
"""
import logging
import threading
from typing import List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from core.schemas import NoteHistoryItem

logger = logging.getLogger(__name__)

HISTORY_KEY = "academia_mind_history"
MAX_HISTORY = 10

_history_adapter = TypeAdapter(List[NoteHistoryItem])

# Guards the read-modify-write of the saved history within this process
_write_lock = threading.Lock()


def prepend_capped(items: Sequence[NoteHistoryItem], item: NoteHistoryItem) -> Tuple[NoteHistoryItem, ...]:
    return (item, *items)[:MAX_HISTORY]


def dump_history(items: Sequence[NoteHistoryItem]) -> str:
    return _history_adapter.dump_json(list(items), by_alias=True).decode("utf-8")


class HistoryStore:
    def __init__(self, kv):
        """kv: anything with get(key) -> str | None and set(key, value)"""
        self.kv = kv
        self.items: Tuple[NoteHistoryItem, ...] = ()

    def load(self) -> Tuple[NoteHistoryItem, ...]:
        raw = self.kv.get(HISTORY_KEY)
        if not raw:
            self.items = ()
            return self.items
        try:
            self.items = tuple(_history_adapter.validate_json(raw))[:MAX_HISTORY]
        except ValidationError:
            logger.exception("History parse failed, starting with an empty history")
            self.items = ()
        return self.items

    def record(self, item: NoteHistoryItem) -> Tuple[NoteHistoryItem, ...]:
        """
        Prepend item to the saved history and write it back.
        Re-reads storage under the write lock so concurrent writers never drop each other's items.
        """
        with _write_lock:
            self.load()
            if self.items and item.timestamp < self.items[0].timestamp:
                # wall clock went backwards; keep newest-first timestamps non-increasing
                item = item.model_copy(update={"timestamp": self.items[0].timestamp})
            self.items = prepend_capped(self.items, item)
            self._persist()
            return self.items

    def get(self, item_id: str) -> Optional[NoteHistoryItem]:
        return next((i for i in self.items if i.id == item_id), None)

    def clear(self) -> None:
        with _write_lock:
            self.items = ()
            self._persist()

    def _persist(self) -> None:
        self.kv.set(HISTORY_KEY, dump_history(self.items))

"""Tests for the capped, persisted history list."""
import json

from conftest import DictStore, make_notes
from core.history_store import HISTORY_KEY, MAX_HISTORY, HistoryStore
from core.schemas import NoteHistoryItem


def _item(n: int) -> NoteHistoryItem:
    return NoteHistoryItem(id=f"id-{n}", timestamp=1_700_000_000_000 + n, original_text=f"text {n}", notes=make_notes(f"Topic {n}"))


def test_load_without_saved_history_is_empty(dict_store):
    assert HistoryStore(dict_store).load() == ()


def test_record_prepends_and_persists(dict_store):
    store = HistoryStore(dict_store)
    store.record(_item(1))
    store.record(_item(2))

    assert [i.id for i in store.items] == ["id-2", "id-1"]
    saved = json.loads(dict_store.data[HISTORY_KEY])
    assert [i["id"] for i in saved] == ["id-2", "id-1"]
    assert saved[0]["originalText"] == "text 2"
    assert saved[0]["notes"]["topicOverview"] == "Topic 2"


def test_history_is_capped_newest_first(dict_store):
    store = HistoryStore(dict_store)
    for n in range(25):
        store.record(_item(n))
        assert len(store.items) <= MAX_HISTORY

    assert len(store.items) == MAX_HISTORY
    assert store.items[0].id == "id-24"
    timestamps = [i.timestamp for i in store.items]
    assert timestamps == sorted(timestamps, reverse=True)
    assert len(json.loads(dict_store.data[HISTORY_KEY])) == MAX_HISTORY


def test_round_trip_through_sql_store(sql_store):
    store = HistoryStore(sql_store)
    for n in range(3):
        store.record(_item(n))

    reloaded = HistoryStore(sql_store).load()
    assert reloaded == store.items


def test_malformed_json_loads_as_empty(caplog):
    store = HistoryStore(DictStore({HISTORY_KEY: "{not json"}))
    assert store.load() == ()
    assert "History parse failed" in caplog.text


def test_wrong_shape_loads_as_empty():
    store = HistoryStore(DictStore({HISTORY_KEY: json.dumps([{"id": "x"}])}))
    assert store.load() == ()


def test_oversized_saved_history_is_truncated_on_load():
    raw = json.dumps([_item(n).model_dump(by_alias=True) for n in range(15)])
    assert len(HistoryStore(DictStore({HISTORY_KEY: raw})).load()) == MAX_HISTORY


def test_get_and_clear(dict_store):
    store = HistoryStore(dict_store)
    store.record(_item(1))
    assert store.get("id-1").original_text == "text 1"
    assert store.get("missing") is None

    store.clear()
    assert store.items == ()
    assert json.loads(dict_store.data[HISTORY_KEY]) == []


def test_stores_sharing_storage_keep_each_others_items(dict_store):
    first, second = HistoryStore(dict_store), HistoryStore(dict_store)
    first.load()
    second.load()

    first.record(_item(1))
    second.record(_item(2))

    saved = json.loads(dict_store.data[HISTORY_KEY])
    assert [i["id"] for i in saved] == ["id-2", "id-1"]
    assert [i.id for i in second.items] == ["id-2", "id-1"]


def test_older_timestamp_is_raised_to_newest_saved(dict_store):
    store = HistoryStore(dict_store)
    store.record(_item(5))
    saved = store.record(_item(2))

    assert saved[0].id == "id-2"
    assert saved[0].timestamp == saved[1].timestamp == _item(5).timestamp
    assert json.loads(dict_store.data[HISTORY_KEY])[0]["timestamp"] == _item(5).timestamp

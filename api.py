from fastapi import FastAPI, Depends, HTTPException, UploadFile, File, Form
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel
from typing import Literal

from core.database import KeyValueStore
from core.history_store import HistoryStore
from core.ingestion import ACCEPTED_EXTENSIONS
from core.workflow import StudyWorkflow, AppState, Phase
from features.export import clipboard_digest, render_print_html
from features.study_notes import generate_study_notes

app = FastAPI(title="AcademiaMind API Layer")

# error_code -> HTTP status
ERROR_STATUS = {
    "empty_document": 400,
    "extraction_failed": 400,
    "response_malformed": 502,
    "transport_failure": 502,
}


def get_kv_store() -> KeyValueStore:
    return KeyValueStore()


def get_history(kv: KeyValueStore = Depends(get_kv_store)) -> HistoryStore:
    history = HistoryStore(kv)
    history.load()
    return history


def get_generator():
    return generate_study_notes


def get_workflow(
    history: HistoryStore = Depends(get_history),
    kv: KeyValueStore = Depends(get_kv_store),
    generate=Depends(get_generator),
) -> StudyWorkflow:
    return StudyWorkflow(history, generate=generate, theme_store=kv)


def _result(state: AppState) -> dict:
    """Turns a finished workflow state into a response body, or raises."""
    if state.phase == Phase.FAILED:
        raise HTTPException(status_code=ERROR_STATUS.get(state.error_code, 500), detail=state.error)
    item = state.history[0]
    return {"notes": state.notes.model_dump(by_alias=True), "item": item.model_dump(by_alias=True)}


def _find_item(history: HistoryStore, item_id: str):
    item = history.get(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="History item not found")
    return item


class NotesRequest(BaseModel):
    text: str


@app.post("/api/notes")
def generate_notes(request: NotesRequest, workflow: StudyWorkflow = Depends(get_workflow)):
    """Generate a study pack from pasted text"""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Please paste some study material first.")
    state = workflow.submit_text(workflow.initial_state(), request.text)
    return _result(state)


@app.post("/api/upload")
async def upload_document(
    file_type: Literal["pdf", "docx", "txt"] = Form(...),
    file: UploadFile = File(...),
    workflow: StudyWorkflow = Depends(get_workflow),
):
    """
    Handles document ingest.
    1. Check the file matches the declared format
    2. Extract text
    3. Generate notes and record them in history
    """
    if not (file.filename or "").lower().endswith(ACCEPTED_EXTENSIONS[file_type]):
        raise HTTPException(status_code=400, detail=f"Expected a {', '.join(ACCEPTED_EXTENSIONS[file_type])} file.")

    raw_bytes = await file.read()
    state = workflow.submit_document(workflow.initial_state(), raw_bytes, file_type)
    return _result(state)


@app.get("/api/history")
def list_history(history: HistoryStore = Depends(get_history)):
    """Fetch all history items, newest first"""
    return [item.model_dump(by_alias=True) for item in history.items]


@app.get("/api/history/{item_id}")
def select_history(item_id: str, workflow: StudyWorkflow = Depends(get_workflow)):
    """Restore a past study pack. Reads only."""
    state = workflow.initial_state()
    selected = workflow.select_history(state, item_id)
    if selected is state:
        raise HTTPException(status_code=404, detail="History item not found")
    return {"inputText": selected.input_text, "notes": selected.notes.model_dump(by_alias=True)}


@app.delete("/api/history")
def clear_history(workflow: StudyWorkflow = Depends(get_workflow)):
    workflow.clear_history(workflow.initial_state())
    return {"status": "success"}


@app.get("/api/history/{item_id}/digest", response_class=PlainTextResponse)
def history_digest(item_id: str, history: HistoryStore = Depends(get_history)):
    return clipboard_digest(_find_item(history, item_id).notes)


@app.get("/api/history/{item_id}/print", response_class=HTMLResponse)
def history_print(item_id: str, history: HistoryStore = Depends(get_history)):
    return render_print_html(_find_item(history, item_id).notes)


class ThemeRequest(BaseModel):
    theme: Literal["dark", "light"]


@app.get("/api/theme")
def get_theme(workflow: StudyWorkflow = Depends(get_workflow)):
    return {"theme": workflow.initial_state().theme}


@app.put("/api/theme")
def set_theme(request: ThemeRequest, workflow: StudyWorkflow = Depends(get_workflow)):
    state = workflow.initial_state()
    if state.theme != request.theme:
        state = workflow.toggle_theme(state)
    return {"theme": state.theme}

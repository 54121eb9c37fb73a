"""
AcademiaMind: Study Pack Generator
Gradio interface: paste or upload material, get a structured, printable study pack.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, wait

import gradio as gr
from dotenv import load_dotenv

load_dotenv()

# Internal Modules
from core.database import KeyValueStore
from core.history_store import HistoryStore
from core.ingestion import ACCEPTED_EXTENSIONS
from core.workflow import (
    StudyWorkflow,
    AppState,
    InputCleared,
    InputEdited,
    LoadingTicked,
    LOADING_INTERVAL,
    transition,
)

# Features
from features.export import clipboard_digest, history_label, render_notes_markdown, write_print_file

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

GENERATE_LABEL = "⚡ Generate Study Pack"
UPLOAD_FORMATS = {
    "PDF File": "pdf",
    "Word Document": "docx",
    "Plain Text": "txt",
}

EMPTY_STATE_MD = """### 🎓 Ready when you are
Paste textbook text or lecture notes, or upload a PDF / Word / text document,
then press **Generate Study Pack** to get an overview, explanation, key points,
common mistakes, exam tips and practice questions."""

kv_store = KeyValueStore()
workflow = StudyWorkflow(HistoryStore(kv_store), theme_store=kv_store)

# ══════════════════════════════════════════════════════════════
# RENDERING
# ══════════════════════════════════════════════════════════════

def render(state: AppState):
    """Map an AppState onto every component the workflow touches."""
    if state.is_busy:
        status = f"⏳ {state.loading_message}"
    elif state.error:
        status = f"❌ **{state.error}**"
    else:
        status = ""

    has_notes = state.notes is not None
    return (
        state,
        gr.update(value=state.input_text, interactive=not state.is_busy),
        status,
        render_notes_markdown(state.notes) if has_notes else ("" if state.is_busy else EMPTY_STATE_MD),
        gr.update(visible=has_notes),
        clipboard_digest(state.notes) if has_notes else "",
        gr.update(choices=[(history_label(i), i.id) for i in state.history], value=None),
        gr.update(
            interactive=not state.is_busy,
            value=state.loading_message if state.is_busy else GENERATE_LABEL,
        ),
    )


def _run_with_progress(state: AppState, fn, *args):
    """Run one workflow step off the UI thread, rotating loading messages until it finishes."""
    yield render(state)
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(fn, state, *args)
        while True:
            done, _ = wait([future], timeout=LOADING_INTERVAL)
            if done:
                break
            state = transition(state, LoadingTicked())
            yield render(state)
        yield render(future.result())

# ══════════════════════════════════════════════════════════════
# HANDLERS
# ══════════════════════════════════════════════════════════════

def on_load():
    state = workflow.initial_state()
    return (*render(state), state.theme)


def on_edit(text, state: AppState):
    return transition(state, InputEdited(text))


def on_clear(state: AppState):
    return render(transition(state, InputCleared()))


def on_submit(text, state: AppState):
    started = workflow.begin_text(state, text)
    if not started.is_busy:
        yield render(started)
        return
    yield from _run_with_progress(started, workflow.run)


def on_upload(file_path, format_label, state: AppState):
    if not file_path:
        yield render(state)
        return
    started = workflow.begin_document(state)
    if not started.is_busy:
        yield render(started)
        return
    with open(file_path, "rb") as fh:
        raw_bytes = fh.read()
    yield from _run_with_progress(started, workflow.run_document, raw_bytes, UPLOAD_FORMATS[format_label])


def on_format_change(format_label):
    return gr.update(file_types=list(ACCEPTED_EXTENSIONS[UPLOAD_FORMATS[format_label]]), value=None)


def on_select_history(item_id, state: AppState):
    if not item_id:
        return render(state)
    return render(workflow.select_history(state, item_id))


def on_clear_history(state: AppState):
    return render(workflow.clear_history(state))


def on_toggle_theme(state: AppState):
    state = workflow.toggle_theme(state)
    return state, state.theme


def on_print(state: AppState, request: gr.Request):
    if state.notes is None:
        return None
    return write_print_file(state.notes, request.session_hash or "local")

# ══════════════════════════════════════════════════════════════
# UI DEFINITION
# ══════════════════════════════════════════════════════════════

css = """
#title h1 { background: linear-gradient(90deg, #4f46e5, #7c3aed); -webkit-background-clip: text; -webkit-text-fill-color: transparent; font-size: 2.2rem; font-weight: 800; }
#status p { font-weight: 700; }
footer { display: none !important; }
"""

APPLY_THEME_JS = "(theme) => { document.body.classList.toggle('dark', theme === 'dark'); }"

with gr.Blocks(title="AcademiaMind 🎓", css=css) as demo:
    app_state = gr.State(AppState())
    theme_box = gr.Textbox(visible=False)

    with gr.Row():
        gr.Markdown("# 🎓 AcademiaMind\nStructured study notes from any material.", elem_id="title")
        theme_btn = gr.Button("🌓 Toggle Theme", size="sm", scale=0)

    with gr.Row():
        with gr.Column(scale=8):
            with gr.Group():
                input_box = gr.Textbox(
                    label="📝 Input Material",
                    placeholder="Paste textbook text, lecture notes, or use 'Upload' for documents...",
                    lines=8,
                )
                with gr.Row():
                    submit_btn = gr.Button(GENERATE_LABEL, variant="primary", scale=3)
                    clear_btn = gr.Button("Clear", size="sm", scale=1)

            with gr.Accordion("☁️ Upload Document", open=False):
                format_radio = gr.Radio(list(UPLOAD_FORMATS), value="PDF File", label="Document Format")
                file_in = gr.File(label="Upload File", file_count="single", file_types=[".pdf"], type="filepath")

            status_md = gr.Markdown(elem_id="status")
            notes_md = gr.Markdown(EMPTY_STATE_MD)

            with gr.Group(visible=False) as export_group:
                digest_box = gr.Textbox(label="📋 Copy to Clipboard", lines=6, show_copy_button=True, interactive=False)
                print_btn = gr.Button("🖨️ Save Complete Summary (printable HTML)")
                print_file = gr.File(label="Printable Study Pack", interactive=False)

        with gr.Column(scale=4, variant="panel"):
            gr.Markdown("### 🕘 Session History")
            history_radio = gr.Radio(choices=[], label="Past study packs", show_label=False)
            clear_history_btn = gr.Button("🗑️ Clear History", size="sm", variant="stop")

    # === WIRING ===
    render_outputs = [app_state, input_box, status_md, notes_md, export_group, digest_box, history_radio, submit_btn]

    demo.load(on_load, None, render_outputs + [theme_box])
    theme_box.change(None, theme_box, None, js=APPLY_THEME_JS)
    theme_btn.click(on_toggle_theme, app_state, [app_state, theme_box])

    input_box.input(on_edit, [input_box, app_state], app_state)
    clear_btn.click(on_clear, app_state, render_outputs)
    submit_btn.click(on_submit, [input_box, app_state], render_outputs)

    format_radio.change(on_format_change, format_radio, file_in)
    file_in.upload(on_upload, [file_in, format_radio, app_state], render_outputs).then(
        lambda: None, None, file_in
    )

    history_radio.input(on_select_history, [history_radio, app_state], render_outputs)
    clear_history_btn.click(on_clear_history, app_state, render_outputs)
    print_btn.click(on_print, app_state, print_file)

if __name__ == "__main__":
    demo.queue().launch()

"""
Renders a StudyNotes pack for the screen, for printing, and as a plain-text digest.
"""
import html
import os
import tempfile
from datetime import date, datetime
from typing import Optional

from core.schemas import NoteHistoryItem, StudyNotes

APP_NAME = "AcademiaMind"


def clipboard_digest(notes: StudyNotes) -> str:
    key_points = "\n".join(notes.key_points)
    return (
        f"{APP_NAME.upper()} SUMMARY\n\n"
        f"TOPIC: {notes.topic_overview}\n\n"
        f"EXPLANATION:\n{notes.detailed_explanation}\n\n"
        f"KEY POINTS:\n{key_points}"
    )


def history_label(item: NoteHistoryItem, width: int = 60) -> str:
    topic = item.notes.topic_overview.strip().replace("\n", " ")
    if len(topic) > width:
        topic = topic[: width - 1].rstrip() + "…"
    day = datetime.fromtimestamp(item.timestamp / 1000).strftime("%d %b %Y")
    return f"{topic} · {day}"


def render_notes_markdown(notes: StudyNotes) -> str:
    q = notes.study_questions
    out = f"## 🧭 Topic Overview\n\n**{notes.topic_overview}**\n\n"

    out += "## 📖 Detailed Explanation\n\n"
    for para in notes.paragraphs():
        out += f"{para}\n\n"

    out += "## 📌 Key Points\n\n"
    for i, point in enumerate(notes.key_points, 1):
        out += f"{i}. {point}\n"

    if notes.examples:
        out += "\n## 💡 Examples\n\n"
        for ex in notes.examples:
            out += f"- {ex}\n"

    out += "\n## 🛡️ Common Mistakes & Exam Tips\n\n### Watch Out For:\n"
    for m in notes.common_mistakes:
        out += f"- {m}\n"
    out += "\n### Pro Exam Tips:\n"
    for t in notes.exam_tips:
        out += f"- {t}\n"

    out += "\n## 📝 Practice & Knowledge Check\n\n### ✔️ Multiple Choice\n\n"
    for i, mcq in enumerate(q.mcqs, 1):
        out += f"**{i}. {mcq.question}**\n"
        for opt in mcq.options:
            out += f"- {opt}\n"
        out += f"\n<details><summary>Check Correct Answer</summary>\n\n**{mcq.answer}**\n\n</details>\n\n"

    out += "### ✒️ Short Response\n\n"
    for i, sa in enumerate(q.short_answers, 1):
        out += f"**{i}. {sa.question}**\n\n<details><summary>View Explanation</summary>\n\n{sa.answer}\n\n</details>\n\n"

    out += "### 🎓 Exam-Style Scenario\n\n"
    out += f"**{q.exam_style.question}**\n\n> **Model Solution**\n>\n> {q.exam_style.model_answer}\n"
    return out


_PRINT_CSS = """
body { font-family: Georgia, 'Times New Roman', serif; color: #1e293b; max-width: 780px; margin: 2rem auto; line-height: 1.55; }
.print-header { border-bottom: 2px solid #4f46e5; padding-bottom: 1rem; margin-bottom: 2rem; }
.print-header .subtitle { color: #4f46e5; font-weight: bold; letter-spacing: .1em; text-transform: uppercase; font-size: .8rem; }
.print-header .meta { color: #94a3b8; font-size: .75rem; }
h2 { font-size: 1rem; letter-spacing: .08em; text-transform: uppercase; color: #4338ca; margin-top: 2rem; }
.answer { font-size: .85rem; font-style: italic; color: #64748b; }
.page-break { page-break-before: always; }
.print-footer { margin-top: 3rem; border-top: 1px solid #e2e8f0; padding-top: 1rem; font-size: .75rem; color: #94a3b8; text-align: center; }
"""


def _items(values) -> str:
    return "".join(f"<li>{html.escape(v)}</li>" for v in values)


def render_print_html(notes: StudyNotes, generated_on: Optional[date] = None) -> str:
    """Standalone print layout: every answer is shown inline, nothing is collapsed."""
    e = html.escape
    q = notes.study_questions
    generated_on = generated_on or date.today()

    mcqs = ""
    for i, mcq in enumerate(q.mcqs, 1):
        mcqs += (
            f"<div class='question'><p><strong>{i}. {e(mcq.question)}</strong></p>"
            f"<ul>{_items(mcq.options)}</ul>"
            f"<p class='answer'>Correct Answer: {e(mcq.answer)}</p></div>"
        )
    shorts = ""
    for i, sa in enumerate(q.short_answers, 1):
        shorts += (
            f"<div class='question'><p><strong>{i}. {e(sa.question)}</strong></p>"
            f"<p class='answer'><strong>Key Concept:</strong> {e(sa.answer)}</p></div>"
        )
    paragraphs = "".join(f"<p>{e(p)}</p>" for p in notes.paragraphs())

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{e(notes.topic_overview)} · {APP_NAME}</title>
<style>{_PRINT_CSS}</style>
</head>
<body>
<div class="print-header">
  <h1>{e(notes.topic_overview)}</h1>
  <p class="subtitle">Study Summary &amp; Practice Pack</p>
  <p class="meta">Generated on {generated_on.strftime("%d %B %Y")} · Powered by {APP_NAME}</p>
</div>
<h2>Topic Overview</h2>
<p>{e(notes.topic_overview)}</p>
<h2>Detailed Explanation</h2>
{paragraphs}
<h2>Key Points</h2>
<ol>{_items(notes.key_points)}</ol>
<h2>Examples</h2>
<ul>{_items(notes.examples)}</ul>
<h2>Common Mistakes</h2>
<ul>{_items(notes.common_mistakes)}</ul>
<h2>Exam Tips</h2>
<ul>{_items(notes.exam_tips)}</ul>
<div class="page-break">
<h2>Practice &amp; Knowledge Check</h2>
<h3>Multiple Choice</h3>
{mcqs}
<h3>Short Response</h3>
{shorts}
<h3>Exam-Style Scenario</h3>
<p><strong>{e(q.exam_style.question)}</strong></p>
<p><em>Model Solution:</em> {e(q.exam_style.model_answer)}</p>
</div>
<div class="print-footer">
  <p>Page Generated by {APP_NAME} Study Assistant</p>
</div>
</body>
</html>
"""


def write_print_file(notes: StudyNotes, session_id: str, directory: Optional[str] = None) -> str:
    """Write the print layout to one file per session, overwriting the previous print."""
    directory = directory or os.path.join(tempfile.gettempdir(), "academiamind")
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"study_pack_{session_id}.html")
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_print_html(notes))
    return path

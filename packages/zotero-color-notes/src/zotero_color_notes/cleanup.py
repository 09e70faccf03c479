"""Remove notes left by earlier runs before new summaries are written."""

from typing import Any, Callable, Dict, List, Optional

from zotero_color_notes.api import ZoteroAPI, ZoteroWriteError
from zotero_color_notes.config import SummaryConfig
from zotero_color_notes.items import get_note_tags

# Zotero's "Add Note from Annotations" output opens with its citation block
HOST_NOTE_MARKER = '<div data-citation-items'
HOST_NOTE_KEYWORD = 'Annotations'

HOST_NOTE = 'host'
GENERATED_NOTE = 'generated'


def is_host_annotation_note(note_html: str) -> bool:
    return note_html.startswith(HOST_NOTE_MARKER) and HOST_NOTE_KEYWORD in note_html


def generated_note_prefix(summary: SummaryConfig) -> str:
    """Opening of every note written for the configured color."""
    return f"<h2>{summary.header_title} ({summary.target_color}"


def is_generated_note(note: Dict[str, Any], summary: SummaryConfig) -> bool:
    """True for notes this tool wrote for the configured color.

    Matches the structured color tag, or the literal header prefix for notes
    written before tagging existed. The prefix match is case-sensitive.
    """
    if summary.color_tag in get_note_tags(note):
        return True
    note_html = note.get('data', {}).get('note', '') or ''
    return note_html.startswith(generated_note_prefix(summary))


def classify_note(note: Dict[str, Any], summary: SummaryConfig) -> Optional[str]:
    """Return HOST_NOTE, GENERATED_NOTE, or None for notes to keep."""
    note_html = note.get('data', {}).get('note', '') or ''
    if not note_html:
        return None
    if summary.delete_host_notes and is_host_annotation_note(note_html):
        return HOST_NOTE
    if is_generated_note(note, summary):
        return GENERATED_NOTE
    return None


def cleanup_notes(
    api: ZoteroAPI,
    parent: Dict[str, Any],
    summary: SummaryConfig,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> List[str]:
    """Trash the parent's host annotation notes and earlier generated notes.

    Returns:
        Keys of the notes moved to the trash
    """
    log = progress_callback or print
    log(f"Looking for old notes to remove (Standard Zotero or matching color {summary.target_color})...")

    removed = []
    for note in api.get_child_notes(parent['key']):
        kind = classify_note(note, summary)
        if kind is None:
            continue

        label = 'Standard' if kind == HOST_NOTE else 'This Script'
        log(f"Removing old note (ID: {note['key']}, Type: {label})")
        try:
            api.trash_item(note)
        except ZoteroWriteError as e:
            log(f"Error removing note {note['key']}: {e}")
            continue
        removed.append(note['key'])

    log("Finished cleanup check.")
    return removed

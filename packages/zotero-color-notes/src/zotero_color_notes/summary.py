"""
Color summary run

Resolves the selection, clears notes from earlier runs and writes one summary
note per attachment that has annotations in the target color.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from zotero_color_notes.api import ZoteroAPI
from zotero_color_notes.cleanup import cleanup_notes
from zotero_color_notes.config import ColorNotesConfig
from zotero_color_notes.items import get_title
from zotero_color_notes.rendering import filter_annotations, render_note_html
from zotero_color_notes.selection import resolve_selection


@dataclass
class SummaryResult:
    """Outcome of one summary run."""

    parent_key: Optional[str] = None
    attachments_processed: int = 0
    removed_note_keys: List[str] = field(default_factory=list)
    created_note_keys: List[str] = field(default_factory=list)
    skipped_attachments: List[str] = field(default_factory=list)


def create_color_summary(
    api: ZoteroAPI,
    item_key: str,
    config: Optional[ColorNotesConfig] = None,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> SummaryResult:
    """
    Build color summary notes for the selected item

    Args:
        api: Zotero API client
        item_key: Key of the selected item (regular item or child attachment)
        config: Summary settings (default: green, Norwegian labels)
        progress_callback: Optional callback for progress messages

    Returns:
        SummaryResult describing what was removed and created. Failures on
        individual notes are logged and never raised.

    Raises:
        ValueError: if the summary settings are invalid; nothing has been
            fetched or changed at that point
    """
    config = config or ColorNotesConfig()
    summary = config.summary
    log = progress_callback or print
    summary.validate()
    result = SummaryResult()

    selection = resolve_selection(api, item_key, log)
    if selection is None:
        return result

    result.parent_key = selection.parent_key
    result.removed_note_keys = cleanup_notes(api, selection.parent, summary, log)

    for attachment in selection.attachments:
        title = get_title(attachment)
        attachment_key = attachment.get('key', '')
        log(f"Processing attachment: {title}")
        result.attachments_processed += 1

        annotations = api.get_attachment_annotations(attachment_key)
        if not annotations:
            log(" -> No annotations found in this attachment.")
            result.skipped_attachments.append(attachment_key)
            continue

        filtered = filter_annotations(annotations, summary.target_color)
        if not filtered:
            log(f" -> No annotations found with color {summary.target_color} in this attachment.")
            result.skipped_attachments.append(attachment_key)
            continue

        log(f" -> Found {len(filtered)} annotations with color {summary.target_color}.")

        try:
            note_html = render_note_html(filtered, title, summary, api.get_item_uri, log)
            note_key = api.create_note(selection.parent_key, note_html, tags=[summary.color_tag])
        except Exception as e:
            log(f"Error creating or saving note: {e}")
            result.skipped_attachments.append(attachment_key)
            continue

        result.created_note_keys.append(note_key)
        log(f" -> Successfully created note {note_key} for color {summary.target_color}.")

    log("Script finished.")
    return result

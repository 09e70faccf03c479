"""Resolve the selected item into a parent item and its annotatable attachments."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from zotero_color_notes.api import ZoteroAPI
from zotero_color_notes.items import (
    is_file_attachment,
    is_potential_annotation_attachment,
    is_regular_item,
    is_top_level_item,
)


@dataclass
class Selection:
    """Parent item plus the attachments whose annotations will be summarized."""

    parent: Dict[str, Any]
    attachments: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def parent_key(self) -> str:
        return self.parent.get('key', '')


def resolve_selection(
    api: ZoteroAPI,
    item_key: str,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> Optional[Selection]:
    """Resolve a selected item key.

    A regular item is its own parent and contributes all of its PDF, EPUB and
    snapshot attachments. A child file attachment resolves to its parent and
    contributes only itself. Anything else resolves to nothing.

    Args:
        api: Zotero API client
        item_key: Key of the selected item
        progress_callback: Optional callback for progress messages

    Returns:
        Selection, or None if the library is not editable or nothing suitable
        was found. No write calls happen in either case.
    """
    log = progress_callback or print

    if not api.can_edit():
        log("Library is not editable with the configured API key.")
        return None

    selected = api.get_item(item_key)
    parent = None
    attachments: List[Dict[str, Any]] = []

    if selected and is_regular_item(selected):
        parent = selected
        attachments = api.get_file_attachments(selected['key'])
    elif selected and is_file_attachment(selected) and not is_top_level_item(selected):
        parent = api.get_item(selected['data']['parentItem'])
        if is_potential_annotation_attachment(selected):
            attachments.append(selected)

    if not parent or not attachments:
        log("No suitable parent item or attachments found.")
        return None

    return Selection(parent=parent, attachments=attachments)

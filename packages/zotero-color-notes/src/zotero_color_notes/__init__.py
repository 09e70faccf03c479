"""
Zotero Color Notes - summarize color-coded annotations into Zotero notes.

Provides functionality for:
- Resolving a selected item into its parent and annotatable attachments
- Removing summary notes left by earlier runs
- Rendering highlights of one color as an HTML table note
"""

from zotero_color_notes.api import ZoteroAPI, ZoteroWriteError
from zotero_color_notes.config import ColorNotesConfig
from zotero_color_notes.summary import SummaryResult, create_color_summary

__version__ = "0.1.0"
__all__ = [
    "ColorNotesConfig",
    "SummaryResult",
    "ZoteroAPI",
    "ZoteroWriteError",
    "create_color_summary",
]

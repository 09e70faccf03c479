"""Shared pytest fixtures for zotero-color-notes tests."""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import responses

from zotero_color_notes.api import ZoteroAPI, ZoteroWriteError
from zotero_color_notes.config import ApiConfig, ColorNotesConfig

# Path to shared fixtures
FIXTURES_DIR = Path(__file__).parent.parent.parent.parent / "shared" / "fixtures"

API_ROOT = "https://api.zotero.org"
LIBRARY_ROOT = f"{API_ROOT}/users/12345"


def load_fixture(path: str) -> Any:
    """Load a JSON fixture file.

    Args:
        path: Relative path within shared/fixtures directory

    Returns:
        Parsed JSON content
    """
    with open(FIXTURES_DIR / path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def journal_article():
    """Load journal article fixture."""
    return load_fixture("items/journal-article.json")


@pytest.fixture
def attachments():
    """Load PDF, snapshot, linked URL and spreadsheet attachments."""
    return load_fixture("items/attachments.json")


@pytest.fixture
def pdf_attachment(attachments):
    return attachments[0]


@pytest.fixture
def mixed_annotations():
    """Green highlight, green underline, yellow highlight, green note."""
    return load_fixture("annotations/mixed-colors.json")


@pytest.fixture
def existing_notes():
    """Load notes left by Zotero, earlier runs and the user."""
    return load_fixture("notes/existing-notes.json")


@pytest.fixture
def key_info():
    return load_fixture("keys/current.json")


@pytest.fixture
def api_config():
    return ApiConfig(api_key="P9NiFoyLeZu2bZNvvuQPDWsd", library_id="12345")


@pytest.fixture
def zotero_api(api_config):
    """Create a ZoteroAPI instance for testing."""
    return ZoteroAPI(api_config)


@pytest.fixture
def config(api_config):
    return ColorNotesConfig(api=api_config)


@pytest.fixture
def messages():
    """Collects progress messages; pass messages.append as progress_callback."""
    return []


@pytest.fixture
def mock_responses():
    """Context manager for mocking HTTP responses.

    Usage:
        def test_something(mock_responses):
            mock_responses.add(responses.GET, url, json=data)
            # ... test code
    """
    with responses.RequestsMock() as rsps:
        yield rsps


class InMemoryZoteroAPI(ZoteroAPI):
    """ZoteroAPI backed by a dict of items instead of HTTP.

    Trashed items disappear from child listings; created notes get
    sequential keys NEWNOTE1, NEWNOTE2, ...
    """

    def __init__(self, items: List[Dict[str, Any]], editable: bool = True,
                 fail_saves: bool = False):
        super().__init__(ApiConfig(api_key="test", library_id="12345"))
        self.items = {item['key']: copy.deepcopy(item) for item in items}
        self.editable = editable
        self.fail_saves = fail_saves
        self.trashed: List[str] = []
        self.created: List[str] = []

    def can_edit(self) -> bool:
        return self.editable

    def get_item(self, item_key: str) -> Optional[Dict[str, Any]]:
        return self.items.get(item_key)

    def get_item_children(self, item_key: str) -> List[Dict[str, Any]]:
        return [item for item in self.items.values()
                if item['data'].get('parentItem') == item_key and not item['data'].get('deleted')]

    def trash_item(self, item: Dict[str, Any]) -> None:
        self.items[item['key']]['data']['deleted'] = True
        self.trashed.append(item['key'])

    def create_note(self, parent_key: str, note_html: str, tags=None) -> str:
        if self.fail_saves:
            raise ZoteroWriteError("Failed to save note: HTTP 412", 412)
        key = f"NEWNOTE{len(self.created) + 1}"
        self.items[key] = {
            "key": key,
            "version": 1,
            "library": {"type": "user", "id": 12345},
            "data": {
                "key": key,
                "itemType": "note",
                "parentItem": parent_key,
                "note": note_html,
                "tags": [{"tag": tag} for tag in (tags or [])],
            },
        }
        self.created.append(key)
        return key

    def notes_of(self, parent_key: str) -> List[Dict[str, Any]]:
        return self.get_child_notes(parent_key)


@pytest.fixture
def library(journal_article, attachments, mixed_annotations, existing_notes):
    """In-memory library holding the parent, its attachments, annotations and notes."""
    return InMemoryZoteroAPI([journal_article] + attachments + mixed_annotations + existing_notes)

"""
Zotero API client

Reads items, notes and annotations from a Zotero library and issues the
two write operations the summary run needs: moving a note to the trash and
saving a new child note.
"""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests

from zotero_color_notes.config import ApiConfig
from zotero_color_notes.items import (
    is_note,
    is_potential_annotation_attachment,
    item_type,
)

PAGE_SIZE = 100


class ZoteroWriteError(RuntimeError):
    """A write request (create or trash) was rejected by Zotero."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ZoteroAPI:
    """Class to interact with the Zotero HTTP API"""

    def __init__(self, config: Optional[ApiConfig] = None):
        """
        Initialize the Zotero API client

        Args:
            config: Connection settings (default: web API, personal library)
        """
        self.config = config or ApiConfig()
        self.base_url = self.config.base_url.rstrip('/')
        self.session = requests.Session()
        self.session.headers.update({"Zotero-API-Version": "3"})
        if self.config.api_key:
            self.session.headers.update({"Zotero-API-Key": self.config.api_key})

    @property
    def library_prefix(self) -> str:
        """Path prefix of the configured library, e.g. /users/12345."""
        library_id = self.config.library_id or "0"
        if self.config.library_type == "group":
            return f"/groups/{library_id}"
        return f"/users/{library_id}"

    def _url(self, endpoint: str) -> str:
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _make_request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """
        Make a GET request to the Zotero API

        Args:
            endpoint: API endpoint (will be joined with base_url)
            params: Optional query parameters

        Returns:
            JSON response, or None if request failed
        """
        url = self._url(endpoint)

        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            print(f"Error making request to {url}: {e}")
            return None
        except json.JSONDecodeError as e:
            print(f"Error parsing JSON response from {url}: {e}")
            return None

    def _get_all(self, endpoint: str) -> List[Dict[str, Any]]:
        """Fetch every page of a list endpoint."""
        results: List[Dict[str, Any]] = []
        start = 0
        while True:
            page = self._make_request(endpoint, params={"limit": PAGE_SIZE, "start": start})
            if not isinstance(page, list):
                break
            results.extend(page)
            if len(page) < PAGE_SIZE:
                break
            start += PAGE_SIZE
        return results

    def get_item(self, item_key: str) -> Optional[Dict[str, Any]]:
        """
        Get a single item by key

        Returns:
            Item data as dictionary, or None if not found
        """
        response = self._make_request(f"{self.library_prefix}/items/{item_key}")
        if isinstance(response, dict):
            return response
        return None

    def get_item_children(self, item_key: str) -> List[Dict[str, Any]]:
        """Get all children of an item (attachments, notes, annotations)."""
        return self._get_all(f"{self.library_prefix}/items/{item_key}/children")

    def get_child_notes(self, item_key: str) -> List[Dict[str, Any]]:
        """Get the child notes of an item."""
        return [child for child in self.get_item_children(item_key) if is_note(child)]

    def get_file_attachments(self, item_key: str) -> List[Dict[str, Any]]:
        """
        Get the PDF, EPUB and snapshot attachments of an item

        Returns:
            Attachment items in the order Zotero returns them
        """
        return [child for child in self.get_item_children(item_key)
                if is_potential_annotation_attachment(child)]

    def get_attachment_annotations(self, attachment_key: str) -> List[Dict[str, Any]]:
        """Get all annotations of an attachment."""
        return [child for child in self.get_item_children(attachment_key)
                if item_type(child) == 'annotation']

    def can_edit(self) -> bool:
        """
        Check whether the API key may write notes to the configured library

        Fails closed: no key, an unreachable server or a missing permission
        all report False.
        """
        if not self.config.api_key:
            return False

        key_info = self._make_request("/keys/current")
        if not isinstance(key_info, dict):
            return False

        access = key_info.get('access', {})
        if self.config.library_type == "group":
            groups = access.get('groups', {})
            grant = groups.get(str(self.config.library_id)) or groups.get('all') or {}
            return bool(grant.get('library')) and bool(grant.get('write'))

        user_id = key_info.get('userID')
        if user_id is not None:
            if not self.config.library_id:
                # The key identifies its owner, so a personal library needs no explicit ID
                self.config.library_id = str(user_id)
            elif str(user_id) != str(self.config.library_id):
                return False
        grant = access.get('user', {})
        return bool(grant.get('notes')) and bool(grant.get('write'))

    def trash_item(self, item: Dict[str, Any]) -> None:
        """
        Move an item to the trash

        Args:
            item: Item dict as returned by the API (key and version are used)

        Raises:
            ZoteroWriteError: if Zotero rejects the request
        """
        key = item.get('key', '')
        url = self._url(f"{self.library_prefix}/items/{key}")
        headers = {}
        version = item.get('version', item.get('data', {}).get('version'))
        if version is not None:
            headers["If-Unmodified-Since-Version"] = str(version)

        try:
            response = self.session.patch(url, json={"deleted": 1}, headers=headers,
                                          timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            raise ZoteroWriteError(f"Error trashing item {key}: {e}") from e

        if response.status_code not in (200, 204):
            raise ZoteroWriteError(
                f"Failed to trash item {key}: HTTP {response.status_code} {response.text}",
                response.status_code,
            )

    def create_note(self, parent_key: str, note_html: str, tags: Optional[List[str]] = None) -> str:
        """
        Save a new child note

        Args:
            parent_key: Key of the parent item
            note_html: HTML body of the note
            tags: Optional tag names to attach to the note

        Returns:
            Key of the created note

        Raises:
            ZoteroWriteError: if Zotero rejects the request
        """
        note = {
            "itemType": "note",
            "parentItem": parent_key,
            "note": note_html,
            "tags": [{"tag": tag} for tag in (tags or [])],
            "collections": [],
            "relations": {},
        }
        url = self._url(f"{self.library_prefix}/items")

        try:
            response = self.session.post(url, json=[note], timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            raise ZoteroWriteError(f"Error saving note: {e}") from e

        if response.status_code != 200:
            raise ZoteroWriteError(
                f"Failed to save note: HTTP {response.status_code} {response.text}",
                response.status_code,
            )

        try:
            result = response.json()
        except json.JSONDecodeError as e:
            raise ZoteroWriteError(f"Error parsing save response: {e}") from e

        # Zotero reports per-object outcomes keyed by the index in the request
        success = result.get('success', {})
        if '0' in success:
            return success['0']
        failed = result.get('failed', {}).get('0', {})
        raise ZoteroWriteError(
            f"Failed to save note: {failed.get('message', 'unknown error')}",
            failed.get('code'),
        )

    def get_item_uri(self, item: Dict[str, Any]) -> str:
        """
        Build the stable zotero.org URI of an item

        Uses the item's own library block when present, falling back to the
        configured library.
        """
        library = item.get('library') or {}
        library_type = library.get('type') or self.config.library_type
        library_id = library.get('id', self.config.library_id or "0")
        segment = "groups" if library_type == "group" else "users"
        return f"http://zotero.org/{segment}/{library_id}/items/{item.get('key', '')}"

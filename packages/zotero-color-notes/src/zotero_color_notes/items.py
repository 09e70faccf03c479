"""Item kind predicates over Zotero API item dicts."""

from typing import Any, Dict, List

PDF_CONTENT_TYPE = 'application/pdf'
EPUB_CONTENT_TYPE = 'application/epub+zip'
SNAPSHOT_CONTENT_TYPE = 'text/html'

NON_REGULAR_TYPES = ('attachment', 'note', 'annotation')


def _data(item: Dict[str, Any]) -> Dict[str, Any]:
    return item.get('data', {}) if item else {}


def item_type(item: Dict[str, Any]) -> str:
    return _data(item).get('itemType', '')


def is_regular_item(item: Dict[str, Any]) -> bool:
    """A bibliographic item, i.e. anything but an attachment, note or annotation."""
    kind = item_type(item)
    return bool(kind) and kind not in NON_REGULAR_TYPES


def is_note(item: Dict[str, Any]) -> bool:
    return item_type(item) == 'note'


def is_attachment(item: Dict[str, Any]) -> bool:
    return item_type(item) == 'attachment'


def is_file_attachment(item: Dict[str, Any]) -> bool:
    """Attachments backed by a file (everything except linked URLs)."""
    return is_attachment(item) and _data(item).get('linkMode') != 'linked_url'


def is_top_level_item(item: Dict[str, Any]) -> bool:
    return not _data(item).get('parentItem')


def is_pdf_attachment(item: Dict[str, Any]) -> bool:
    return is_attachment(item) and _data(item).get('contentType') == PDF_CONTENT_TYPE


def is_epub_attachment(item: Dict[str, Any]) -> bool:
    return is_attachment(item) and _data(item).get('contentType') == EPUB_CONTENT_TYPE


def is_snapshot_attachment(item: Dict[str, Any]) -> bool:
    data = _data(item)
    return (is_attachment(item) and
            data.get('linkMode') == 'imported_url' and
            data.get('contentType') == SNAPSHOT_CONTENT_TYPE)


def is_potential_annotation_attachment(item: Dict[str, Any]) -> bool:
    """Attachments Zotero's reader can annotate: PDF, EPUB and web snapshots."""
    return (is_pdf_attachment(item) or
            is_epub_attachment(item) or
            is_snapshot_attachment(item))


def get_title(item: Dict[str, Any]) -> str:
    return _data(item).get('title', '') or ''


def get_note_tags(item: Dict[str, Any]) -> List[str]:
    return [t.get('tag', '') for t in _data(item).get('tags', []) if t.get('tag')]

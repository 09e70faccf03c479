"""
Annotation filtering and HTML rendering for summary notes.

The note body opens with an <h2> header naming the color; cleanup relies on
that header to find notes from earlier runs, so its prefix must stay stable.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Union

from zotero_color_notes.config import SummaryConfig

SUMMARY_TYPES = ('highlight', 'underline')


def filter_annotations(annotations: List[Dict[str, Any]], target_color: str) -> List[Dict[str, Any]]:
    """Keep highlights and underlines whose color matches target_color, ignoring case."""
    target = target_color.upper()
    filtered = []
    for annotation in annotations:
        ann_data = annotation.get('data', {})
        color = ann_data.get('annotationColor')
        if (ann_data.get('annotationType') in SUMMARY_TYPES and
                color and color.upper() == target):
            filtered.append(annotation)
    return filtered


def escape_html(text: Optional[str]) -> str:
    if not text:
        return ''
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def page_label(position: Union[str, Dict[str, Any], None],
               progress_callback: Optional[Callable[[str], None]] = None) -> str:
    """1-based page number from an annotation position, or '' if unknown.

    The API returns the position as a JSON string. Already decoded dicts are
    accepted as-is.
    """
    log = progress_callback or print
    if not position:
        return ''

    if isinstance(position, str):
        try:
            position = json.loads(position)
        except (json.JSONDecodeError, TypeError):
            log(f"Could not parse annotation position: {position}")
            return ''

    if not isinstance(position, dict):
        log(f"Could not parse annotation position: {position}")
        return ''

    if 'pageIndex' not in position:
        return ''

    page_index = position['pageIndex']
    if isinstance(page_index, bool) or not isinstance(page_index, int):
        log(f"Could not parse annotation position: {position}")
        return ''
    return str(page_index + 1)


def render_header(summary: SummaryConfig, attachment_title: str) -> str:
    return f"<h2>{summary.header_title} ({summary.target_color}) from {attachment_title or 'attachment'}</h2>"


def render_row(text: str, comment: str, uri: str, page: str) -> str:
    return f"""
      <tr>
        <td>{text}</td>
        <td>{comment}</td>
        <td><a href="{uri}">{page}</a></td>
      </tr>
    """


def render_note_html(
    annotations: List[Dict[str, Any]],
    attachment_title: str,
    summary: SummaryConfig,
    item_uri: Callable[[Dict[str, Any]], str],
    progress_callback: Optional[Callable[[str], None]] = None,
) -> str:
    """
    Render the summary note for one attachment

    Args:
        annotations: Already filtered annotations, in display order
        attachment_title: Title shown in the header ('attachment' if empty)
        summary: Header title, color and column labels
        item_uri: Maps an annotation to its zotero.org URI
        progress_callback: Optional callback for progress messages

    Returns:
        Note HTML: header followed by a table with one row per annotation
    """
    text_label, comment_label, page_column_label = summary.column_labels

    parts = [render_header(summary, attachment_title)]
    parts.append(f"""
  <table border="1" cellspacing="0" cellpadding="8" style="border-collapse: collapse; width: 100%;">
    <thead>
      <tr>
        <th>{text_label}</th>
        <th>{comment_label}</th>
        <th>{page_column_label}</th>
      </tr>
    </thead>
    <tbody>
""")

    for annotation in annotations:
        ann_data = annotation.get('data', {})
        parts.append(render_row(
            escape_html(ann_data.get('annotationText')),
            escape_html(ann_data.get('annotationComment')),
            item_uri(annotation),
            page_label(ann_data.get('annotationPosition'), progress_callback),
        ))

    parts.append("""
    </tbody>
  </table>
""")
    return ''.join(parts)

"""Configuration management for zotero-color-notes.

Handles loading and saving configuration from ~/.zotero-color-notes/config.toml
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

import tomli_w


CONFIG_DIR = Path.home() / ".zotero-color-notes"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_BASE_URL = "https://api.zotero.org"
DEFAULT_TARGET_COLOR = "#5fb236"
DEFAULT_HEADER_TITLE = "Ord og forkortelser"
DEFAULT_COLUMN_LABELS = ["Uthevet tekst", "Notat", "Side"]
DEFAULT_NOTE_TAG = "zotero-color-notes"


@dataclass
class ApiConfig:
    """Zotero API connection settings.

    base_url is the API root. Use https://api.zotero.org for the web API or
    http://localhost:23119/api for the desktop local API (read-only).
    """

    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    library_type: str = "user"  # 'user' or 'group'
    library_id: str = ""
    timeout: float = 30.0  # seconds


@dataclass
class SummaryConfig:
    """What to extract and how the summary note is labelled."""

    target_color: str = DEFAULT_TARGET_COLOR
    header_title: str = DEFAULT_HEADER_TITLE
    column_labels: List[str] = field(default_factory=lambda: list(DEFAULT_COLUMN_LABELS))
    note_tag: str = DEFAULT_NOTE_TAG
    delete_host_notes: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError for settings that cannot render a note."""
        # The note table has exactly three columns: text, comment, page
        if len(self.column_labels) != len(DEFAULT_COLUMN_LABELS):
            raise ValueError(
                f"column_labels needs {len(DEFAULT_COLUMN_LABELS)} entries, got {len(self.column_labels)}"
            )

    @property
    def color_tag(self) -> str:
        """Structured tag attached to generated notes for this color (case kept as configured)."""
        return f"{self.note_tag}:{self.target_color}"


@dataclass
class ColorNotesConfig:
    """Complete zotero-color-notes configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "ColorNotesConfig":
        """Load configuration from TOML file.

        Args:
            config_path: Path to config file. Defaults to ~/.zotero-color-notes/config.toml

        Returns:
            ColorNotesConfig with values from file, or defaults if file doesn't exist.
            Missing credentials are filled from ZOTERO_API_KEY / ZOTERO_LIBRARY_ID.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            with open(path, "rb") as f:
                data = tomllib.load(f)

            if "api" in data:
                api_data = data["api"]
                config.api = ApiConfig(
                    base_url=api_data.get("base_url", DEFAULT_BASE_URL),
                    api_key=api_data.get("api_key", ""),
                    library_type=api_data.get("library_type", "user"),
                    library_id=str(api_data.get("library_id", "")),
                    timeout=api_data.get("timeout", 30.0),
                )

            if "summary" in data:
                summary_data = data["summary"]
                config.summary = SummaryConfig(
                    target_color=summary_data.get("target_color", DEFAULT_TARGET_COLOR),
                    header_title=summary_data.get("header_title", DEFAULT_HEADER_TITLE),
                    column_labels=list(summary_data.get("column_labels", DEFAULT_COLUMN_LABELS)),
                    note_tag=summary_data.get("note_tag", DEFAULT_NOTE_TAG),
                    delete_host_notes=summary_data.get("delete_host_notes", True),
                )

        if not config.api.api_key:
            config.api.api_key = os.environ.get("ZOTERO_API_KEY", "")
        if not config.api.library_id:
            config.api.library_id = os.environ.get("ZOTERO_LIBRARY_ID", "")

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save configuration to TOML file.

        Args:
            config_path: Path to config file. Defaults to ~/.zotero-color-notes/config.toml
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "api": {
                "base_url": self.api.base_url,
                "api_key": self.api.api_key,
                "library_type": self.api.library_type,
                "library_id": self.api.library_id,
                "timeout": self.api.timeout,
            },
            "summary": {
                "target_color": self.summary.target_color,
                "header_title": self.summary.header_title,
                "column_labels": list(self.summary.column_labels),
                "note_tag": self.summary.note_tag,
                "delete_host_notes": self.summary.delete_host_notes,
            },
        }

        with open(path, "wb") as f:
            tomli_w.dump(data, f)


def create_default_config(config_path: Optional[Path] = None) -> ColorNotesConfig:
    """Create and save a default configuration file.

    Returns:
        The created ColorNotesConfig
    """
    config = ColorNotesConfig()
    config.save(config_path)
    return config

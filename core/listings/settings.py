"""
Site Settings - Promotional Banner Configuration

A single settings row controls the optional fifth homepage banner. Reads are
public and never fail: when the store is unavailable the banner is hidden.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Final, Optional

from core.storage.base import RecordStore, StoreError


logger = logging.getLogger(__name__)

SETTINGS_TABLE: Final[str] = "settings"


@dataclass(frozen=True)
class BannerSettings:
    """Visibility and image of the promotional banner."""

    banner5_visible: bool = False
    banner5_image: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_SETTINGS: Final = BannerSettings()


def load_settings(store: RecordStore) -> dict[str, Any]:
    """
    Read the settings row.

    Returns the stored row, or the defaults when there is none or the store
    fails.
    """
    try:
        row = store.first_row(SETTINGS_TABLE)
    except StoreError:
        logger.exception("Error fetching settings")
        return DEFAULT_SETTINGS.to_dict()
    return row or DEFAULT_SETTINGS.to_dict()


def save_settings(
    store: RecordStore,
    banner5_visible: Optional[bool],
    banner5_image: Optional[str],
) -> dict[str, Any]:
    """
    Update the settings row, creating it on first save.

    Raises:
        StoreError: If the store call fails
    """
    values = BannerSettings(
        banner5_visible=bool(banner5_visible) if banner5_visible is not None else False,
        banner5_image=banner5_image or "",
    ).to_dict()

    existing = store.first_row(SETTINGS_TABLE)
    if existing and existing.get("id") is not None:
        values["updated_at"] = datetime.now(timezone.utc).isoformat()
        updated = store.update(SETTINGS_TABLE, str(existing["id"]), values)
        if updated is not None:
            return updated

    return store.insert(SETTINGS_TABLE, values)

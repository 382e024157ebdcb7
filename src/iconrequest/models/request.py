from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class UploadItem(BaseModel):
    """One icon request: an app's metadata and where its icon comes from."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    package_name: str = Field(alias="packageName")
    name: str
    activity: str
    icon_path: Path | None = Field(default=None, alias="icon")

    # Set by the archive builder on a copy of the item
    file_name: str | None = Field(default=None, alias="fileName")

    @property
    def component(self) -> str:
        return f"{self.package_name}/{self.activity}"


@dataclass(frozen=True)
class UploadOutcome:
    """Result of uploading one item's icon."""

    package_name: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, package_name: str) -> UploadOutcome:
        return cls(package_name)

    @classmethod
    def failure(cls, package_name: str, message: str) -> UploadOutcome:
        return cls(package_name, message)


def load_items(batch_path: Path) -> list[UploadItem]:
    """
    Load icon requests from a JSON file.

    The file holds a list (or a single object) with ``packageName``, ``name``,
    ``activity`` and optionally ``icon`` keys. Relative icon paths are resolved
    against the file's directory.
    """
    with open(batch_path, encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raw = [raw]

    items = []
    for entry in raw:
        item = UploadItem.model_validate(entry)
        if item.icon_path is not None and not item.icon_path.is_absolute():
            item = item.model_copy(update={"icon_path": batch_path.parent / item.icon_path})
        items.append(item)
    return items

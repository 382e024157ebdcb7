"""Local icon-request archive and share hand-off, used in best-effort mode."""

import re
import tempfile
import zipfile
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Protocol
from xml.sax.saxutils import escape, quoteattr

from rich.console import Console

from iconrequest.config import ArchiveConfig
from iconrequest.images.icons import IconSource, save_png
from iconrequest.log import get_logger
from iconrequest.models.request import UploadItem

logger = get_logger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="utf-8"?>\n'


def fix_name_for_request(name: str) -> str:
    """Turn an app name into a drawable-safe file name, e.g. ``My App!`` -> ``my_app``."""
    fixed = re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")
    if not fixed:
        fixed = "icon"
    if fixed[0].isdigit():
        fixed = f"_{fixed}"
    return fixed


def _drawable(item: UploadItem) -> str:
    if item.file_name:
        return Path(item.file_name).stem
    return fix_name_for_request(item.name)


def build_appfilter(items: Sequence[UploadItem]) -> str:
    lines = [XML_HEADER, "<resources>\n"]
    for item in items:
        lines.append(f"\t<!-- {escape(item.name)} -->\n")
        component = quoteattr(f"ComponentInfo{{{item.component}}}")
        lines.append(f"\t<item component={component} drawable={quoteattr(_drawable(item))} />\n\n")
    lines.append("</resources>\n")
    return "".join(lines)


def build_appmap(items: Sequence[UploadItem]) -> str:
    lines = [XML_HEADER, "<appmap>\n"]
    for item in items:
        lines.append(f"\t<!-- {escape(item.name)} -->\n")
        lines.append(f"\t<item class={quoteattr(item.activity)} name={quoteattr(_drawable(item))} />\n\n")
    lines.append("</appmap>\n")
    return "".join(lines)


def build_theme_resources(items: Sequence[UploadItem]) -> str:
    lines = [XML_HEADER, '<Theme version="1">\n']
    for item in items:
        lines.append(f"\t<!-- {escape(item.name)} -->\n")
        lines.append(f"\t<AppIcon name={quoteattr(item.component)} image={quoteattr(_drawable(item))} />\n\n")
    lines.append("</Theme>\n")
    return "".join(lines)


XML_FILES = {
    "appfilter.xml": build_appfilter,
    "appmap.xml": build_appmap,
    "theme_resources.xml": build_theme_resources,
}


def generated_zip_name(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"icon_request_{now.strftime('%Y%m%d_%H%M%S')}.zip"


def build_archive(
    items: Sequence[UploadItem],
    icon_source: IconSource,
    config: ArchiveConfig,
) -> tuple[Path, list[UploadItem]]:
    """
    Build a ZIP with each item's icon and the three icon-pack XML files.

    Items whose icon could be saved are returned as copies carrying their
    ``file_name``; the input items are left untouched.

    Args:
        items: Items to include
        icon_source: Where icons come from
        config: Archive output settings

    Returns:
        Tuple of (archive path, items with file names assigned)
    """
    config.output_dir.mkdir(parents=True, exist_ok=True)
    zip_path = config.output_dir / generated_zip_name()

    named_items = []
    with tempfile.TemporaryDirectory(prefix="iconrequest_") as tmp:
        work_dir = Path(tmp)
        files: list[Path] = []

        for item in items:
            icon = icon_source.load_icon(item)
            if icon is None:
                named_items.append(item)
                continue

            file_name = f"{fix_name_for_request(item.name)}.png"
            icon_path = work_dir / file_name
            if save_png(icon, icon_path):
                files.append(icon_path)
                item = item.model_copy(update={"file_name": file_name})
            named_items.append(item)

        for xml_name, builder in XML_FILES.items():
            xml_path = work_dir / xml_name
            xml_path.write_text(builder(named_items), encoding="utf-8")
            files.append(xml_path)

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in files:
                zf.write(path, arcname=path.name)

    logger.info("Wrote icon request archive %s (%d files)", zip_path, len(files))
    return zip_path, named_items


class SharePresenter(Protocol):
    """Hands a finished archive to the user."""

    def present(self, archive_path: Path, subject: str) -> None: ...


class ConsoleSharePresenter:
    """Prints the archive location to the terminal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def present(self, archive_path: Path, subject: str) -> None:
        if not archive_path.exists():
            logger.error("Archive does not exist: %s", archive_path)
            return
        self.console.print(f"[bold]{subject}[/bold]")
        self.console.print(f"  Archive ready to share: [green]{archive_path}[/green]")

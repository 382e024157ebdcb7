"""Sequential, fail-fast upload of app metadata in fixed-size batches."""

import json
import locale
from collections.abc import Sequence
from typing import Any, TypeVar

from iconrequest.config import ServiceConfig
from iconrequest.errors import ServiceFailure
from iconrequest.log import get_logger
from iconrequest.models.request import UploadItem
from iconrequest.transport import Transport

logger = get_logger(__name__)

BATCH_SIZE = 10
APP_INFO_PATH = "/app-info/create"

T = TypeVar("T")


def split_batches(items: Sequence[T], size: int = BATCH_SIZE) -> list[list[T]]:
    """Partition items into contiguous batches of at most ``size``, keeping order."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def default_language_code() -> str:
    """Language part of the process locale, e.g. ``en`` for ``en_US``."""
    lang = locale.getlocale()[0]
    if not lang or lang in ("C", "POSIX"):
        return "en"
    return lang.replace("-", "_").split("_")[0].lower()


def build_app_info(batch: Sequence[UploadItem], language_code: str) -> list[dict[str, Any]]:
    """Build the JSON body for one metadata batch."""
    return [
        {
            "languageCode": language_code,
            "mainActivity": item.activity,
            "localizedName": item.name,
            "defaultName": item.name,
            "packageName": item.package_name,
        }
        for item in batch
    ]


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def upload_app_info_batch(
    transport: Transport,
    batch: Sequence[UploadItem],
    service: ServiceConfig,
    language_code: str,
) -> None:
    """
    POST one batch of app info.

    Raises:
        ServiceFailure: On a non-2xx response
        TransportFailure: On a connection or timeout error
    """
    body = json.dumps(build_app_info(batch, language_code), ensure_ascii=False)
    headers = {
        **auth_headers(service.token),
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    response = transport.post(f"{service.endpoint}{APP_INFO_PATH}", data=body.encode("utf-8"), headers=headers)
    if not response.ok:
        raise ServiceFailure(response.status_code)


def upload_app_info_in_batches(
    transport: Transport,
    items: Sequence[UploadItem],
    service: ServiceConfig,
    batch_size: int = BATCH_SIZE,
    language_code: str | None = None,
) -> str | None:
    """
    Upload app info for every item, one batch at a time.

    Stops at the first failed batch; later batches are never sent.

    Args:
        transport: Shared HTTP transport
        items: All items of the submission, in order
        service: Endpoint and token
        batch_size: Items per request
        language_code: Overrides the process locale's language

    Returns:
        None if every batch succeeded, otherwise the failure message
    """
    language_code = language_code or default_language_code()
    batches = split_batches(items, batch_size)

    for index, batch in enumerate(batches, start=1):
        try:
            upload_app_info_batch(transport, batch, service, language_code)
        except ServiceFailure as e:
            logger.error("App info batch %d/%d rejected: HTTP %d", index, len(batches), e.status_code)
            return f"Failed to upload app info: HTTP {e.status_code}"
        except Exception as e:
            logger.exception("App info batch %d/%d failed", index, len(batches))
            return f"Failed to upload app info: {e}"

        logger.debug("Uploaded app info batch %d/%d (%d items)", index, len(batches), len(batch))

    return None

"""Per-item icon upload through a signed URL."""

import json

from iconrequest.config import ServiceConfig
from iconrequest.errors import DecodeFailure
from iconrequest.images.icons import IconSource, encode_png
from iconrequest.log import get_logger
from iconrequest.models.request import UploadItem, UploadOutcome
from iconrequest.transport import Transport
from iconrequest.upload.metadata import auth_headers

logger = get_logger(__name__)

UPLOAD_URL_PATH = "/app-icon/generate-upload-url"


def get_signed_upload_url(transport: Transport, package_name: str, service: ServiceConfig) -> str | None:
    """
    Ask the service for a single-use upload URL.

    Returns:
        The URL, or None if the request failed or the body had no ``uploadURL``
    """
    headers = {**auth_headers(service.token), "Accept": "*/*"}
    try:
        response = transport.get(
            f"{service.endpoint}{UPLOAD_URL_PATH}",
            headers=headers,
            params={"packageName": package_name},
        )
    except Exception:
        logger.exception("Failed to get upload URL for %s", package_name)
        return None

    if not response.ok:
        logger.error("Failed to get upload URL for %s: HTTP %d", package_name, response.status_code)
        return None

    try:
        upload_url = json.loads(response.content).get("uploadURL")
    except (ValueError, AttributeError) as e:
        logger.error("Malformed upload URL response for %s: %s", package_name, e)
        return None

    if not isinstance(upload_url, str) or not upload_url:
        logger.error("Upload URL response for %s has no uploadURL", package_name)
        return None

    return upload_url


def upload_icon(
    transport: Transport,
    item: UploadItem,
    service: ServiceConfig,
    icon_source: IconSource,
) -> UploadOutcome:
    """
    Upload one item's icon: resolve a signed URL, encode the icon, PUT it.

    Never raises; every path produces exactly one outcome.
    """
    package_name = item.package_name
    try:
        upload_url = get_signed_upload_url(transport, package_name, service)
        if upload_url is None:
            return UploadOutcome.failure(package_name, f"Failed to get upload URL for {package_name}")

        icon = icon_source.load_icon(item)
        if icon is None:
            return UploadOutcome.failure(package_name, f"Failed to get icon for {package_name}")

        try:
            png_bytes = encode_png(icon)
        except DecodeFailure as e:
            logger.error("Could not encode icon for %s: %s", package_name, e)
            return UploadOutcome.failure(package_name, f"Failed to convert icon to bitmap for {package_name}")

        # The signed URL authorizes the write; only the media type is sent
        response = transport.put(upload_url, data=png_bytes, headers={"Content-Type": "image/png"})
        if not response.ok:
            return UploadOutcome.failure(
                package_name, f"Failed to upload icon for {package_name}: HTTP {response.status_code}"
            )

        return UploadOutcome.success(package_name)

    except Exception as e:
        logger.exception("Icon upload failed for %s", package_name)
        return UploadOutcome.failure(package_name, f"Failed to upload icon for {package_name}: {e}")

"""Submission of icon requests: metadata batches, then bounded icon fan-out."""

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from iconrequest.archive import ConsoleSharePresenter, SharePresenter, build_archive
from iconrequest.config import ServiceConfig, UploadConfig, UploadMode
from iconrequest.errors import ConfigurationMissing, UploadInterrupted
from iconrequest.images.icons import FileIconSource, IconSource
from iconrequest.log import get_logger
from iconrequest.models.request import UploadItem
from iconrequest.transport import Transport
from iconrequest.upload.fanout import BoundedFanOut, CompletionCallback
from iconrequest.upload.icons import upload_icon
from iconrequest.upload.metadata import upload_app_info_in_batches
from iconrequest.upload.results import ResultAggregator

logger = get_logger(__name__)

TOKEN_MISSING = "Statistics service token not configured"
ENDPOINT_MISSING = "Statistics service endpoint not configured"


@dataclass
class SubmitOutcome:
    """Result of a submission: an error message (None on success) and the archive, if one was built."""

    error: str | None = None
    archive_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def require_service_config(service: ServiceConfig) -> ServiceConfig:
    """
    Check that both token and endpoint are set, token first.

    Raises:
        ConfigurationMissing: If either is empty
    """
    if not service.token:
        raise ConfigurationMissing(TOKEN_MISSING)
    if not service.endpoint:
        raise ConfigurationMissing(ENDPOINT_MISSING)
    return service


class IconRequestSubmitter:
    """
    Uploads icon requests to the statistics service.

    In authoritative mode the upload decides the result. In best-effort mode
    upload failures are only logged, and the result comes from building the
    local archive and handing it to the share presenter.

    The transport and worker pool are reused across ``submit`` calls.
    """

    def __init__(
        self,
        config_provider: Callable[[], ServiceConfig],
        upload_config: UploadConfig | None = None,
        transport: Transport | None = None,
        icon_source: IconSource | None = None,
        presenter: SharePresenter | None = None,
        fanout: BoundedFanOut | None = None,
    ):
        self.config_provider = config_provider
        self.upload_config = upload_config or UploadConfig()
        self.icon_source = icon_source or FileIconSource()
        self.presenter = presenter or ConsoleSharePresenter()

        self._owns_transport = transport is None
        self.transport = transport or Transport(self.upload_config.transport)
        self._owns_fanout = fanout is None
        self.fanout = fanout or BoundedFanOut(self.upload_config.max_concurrency)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        if self._owns_fanout:
            self.fanout.close()
        if self._owns_transport:
            self.transport.close()

    def submit(
        self,
        items: Sequence[UploadItem],
        is_premium: bool = False,
        interrupt: threading.Event | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> str | None:
        """
        Submit icon requests.

        Args:
            items: Requests to submit, in order
            is_premium: Accepted for compatibility; does not change behavior
            interrupt: Set to abort the icon fan-out
            on_complete: Called after each icon upload finishes

        Returns:
            None on success, otherwise a human-readable error message
        """
        return self.submit_detailed(items, is_premium, interrupt, on_complete).error

    def submit_detailed(
        self,
        items: Sequence[UploadItem],
        is_premium: bool = False,
        interrupt: threading.Event | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> SubmitOutcome:
        """Like ``submit`` but also returns the archive path in best-effort mode."""
        mode = self.upload_config.mode
        logger.debug("Submitting %d requests (mode=%s, premium=%s)", len(items), mode.value, is_premium)

        try:
            if mode is UploadMode.BEST_EFFORT:
                return self._submit_best_effort(items, interrupt, on_complete)
            return SubmitOutcome(error=self._submit_authoritative(items, interrupt, on_complete))
        except Exception as e:
            logger.exception("Icon request submission failed")
            return SubmitOutcome(error=f"Request failed: {e}")

    def _submit_authoritative(
        self,
        items: Sequence[UploadItem],
        interrupt: threading.Event | None,
        on_complete: CompletionCallback | None,
    ) -> str | None:
        try:
            service = require_service_config(self.config_provider())
        except ConfigurationMissing as e:
            logger.error("%s", e)
            return str(e)

        return self._upload(service, items, interrupt, on_complete)

    def _submit_best_effort(
        self,
        items: Sequence[UploadItem],
        interrupt: threading.Event | None,
        on_complete: CompletionCallback | None,
    ) -> SubmitOutcome:
        # Step 1: statistics upload, failures never surface
        try:
            service = require_service_config(self.config_provider())
        except ConfigurationMissing as e:
            logger.debug("Skipping statistics upload: %s", e)
            service = None

        if service is not None:
            try:
                error = self._upload(service, items, interrupt, on_complete)
            except Exception as e:
                error = str(e)
            if error:
                logger.warning("Statistics upload failed: %s", error)

        # Step 2: the archive decides the result
        try:
            archive_path, _ = build_archive(items, self.icon_source, self.upload_config.archive)
        except Exception as e:
            logger.exception("Failed to generate ZIP")
            return SubmitOutcome(error=f"Failed to generate ZIP: {e}")

        # Step 3: hand off to the presenter
        try:
            self.presenter.present(archive_path, self.upload_config.archive.share_subject)
        except Exception:
            logger.exception("Failed to present archive %s", archive_path)

        return SubmitOutcome(archive_path=archive_path)

    def _upload(
        self,
        service: ServiceConfig,
        items: Sequence[UploadItem],
        interrupt: threading.Event | None,
        on_complete: CompletionCallback | None,
    ) -> str | None:
        error = upload_app_info_in_batches(
            self.transport,
            items,
            service,
            batch_size=self.upload_config.batch_size,
            language_code=self.upload_config.language_code,
        )
        if error is not None:
            return error

        aggregator = ResultAggregator()
        upload = partial(upload_icon, self.transport, service=service, icon_source=self.icon_source)
        try:
            self.fanout.run(items, upload, aggregator, interrupt=interrupt, on_complete=on_complete)
        except UploadInterrupted as e:
            logger.warning("%s", e)
            return str(e)

        logger.info(
            "Icon upload finished: %d succeeded, %d failed",
            aggregator.success_count,
            aggregator.failure_count,
        )
        return aggregator.summary()

"""Metadata and icon upload to the statistics service."""

from iconrequest.upload.fanout import BoundedFanOut
from iconrequest.upload.icons import get_signed_upload_url, upload_icon
from iconrequest.upload.metadata import BATCH_SIZE, split_batches, upload_app_info_in_batches
from iconrequest.upload.results import ResultAggregator

__all__ = [
    "BATCH_SIZE",
    "BoundedFanOut",
    "ResultAggregator",
    "get_signed_upload_url",
    "split_batches",
    "upload_app_info_in_batches",
    "upload_icon",
]

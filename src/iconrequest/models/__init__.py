"""Data models for icon requests."""

from iconrequest.models.request import UploadItem, UploadOutcome, load_items

__all__ = ["UploadItem", "UploadOutcome", "load_items"]

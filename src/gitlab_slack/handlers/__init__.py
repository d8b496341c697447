"""Webhook event handlers: routing, formatting and delivery."""

from .dispatcher import NotificationDispatcher
from .issue import IssueEventProcessor, LabelDelta, compute_label_delta
from .router import EventRouter, InvalidPayloadError, unrecognized_notification

__all__ = [
    # Routing
    "EventRouter",
    "InvalidPayloadError",
    "unrecognized_notification",
    # Issues
    "IssueEventProcessor",
    "LabelDelta",
    "compute_label_delta",
    # Delivery
    "NotificationDispatcher",
]

"""Client library reporting events and funnel steps to Mixpanel."""

from .client import TrackingClient
from .errors import ValidationError
from .logger import ErrorSink, MemoryLogger, StderrLogger
from .models import (
    FUNNEL_EVENT,
    FunnelSpec,
    RecordOptions,
    RemoteAddressProvider,
    TrackerOptions,
    TrackingRequest,
)

__all__ = [
    "TrackingClient",
    "ValidationError",
    "ErrorSink",
    "MemoryLogger",
    "StderrLogger",
    "FUNNEL_EVENT",
    "FunnelSpec",
    "RecordOptions",
    "RemoteAddressProvider",
    "TrackerOptions",
    "TrackingRequest",
]

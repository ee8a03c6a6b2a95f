from __future__ import annotations

import base64
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .errors import ValidationError

FUNNEL_EVENT = "mp_funnel"
EVENT_FLAG = "event"
FUNNEL_FLAG = "funnel"

DEFAULT_HTTPS_ENDPOINT = "https://api.mixpanel.com"
DEFAULT_HTTP_ENDPOINT = "http://api.mixpanel.com"

_WHITESPACE_RE = re.compile(r"\s")


@runtime_checkable
class RemoteAddressProvider(Protocol):
    """Request context able to report the client's remote address."""

    def remote_ip(self) -> Optional[str]: ...


@dataclass(frozen=True)
class TrackerOptions:
    ssl: bool = True
    https_endpoint: str = DEFAULT_HTTPS_ENDPOINT
    http_endpoint: str = DEFAULT_HTTP_ENDPOINT

    @property
    def endpoint(self) -> str:
        base = self.https_endpoint if self.ssl else self.http_endpoint
        return base.rstrip("/")


@dataclass(frozen=True)
class FunnelSpec:
    funnel: str
    step: int

    @classmethod
    def from_flag(cls, value: Any) -> "FunnelSpec":
        if isinstance(value, FunnelSpec):
            return value
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise ValidationError("funnel flag must be a (funnel, step) pair")
        if len(value) != 2:
            raise ValidationError("funnel flag must be a (funnel, step) pair")
        return cls(funnel=value[0], step=value[1])

    def properties(self, goal: str) -> Dict[str, Any]:
        return {"funnel": self.funnel, "step": self.step, "goal": goal}


@dataclass(frozen=True)
class RecordOptions:
    """Control flags for ``TrackingClient.record``.

    ``event`` only matters when ``funnel`` is set: a funnel submission is
    accompanied by a plain event only when ``event`` is true.
    """

    event: bool = False
    funnel: Optional[FunnelSpec] = None

    @classmethod
    def extract(
        cls, properties: Mapping[str, Any]
    ) -> Tuple["RecordOptions", Dict[str, Any]]:
        """Split the legacy reserved keys out of a property mapping."""
        remaining = dict(properties)
        event = remaining.pop(EVENT_FLAG, None)
        funnel = remaining.pop(FUNNEL_FLAG, None)
        options = cls(
            event=event is True,
            funnel=FunnelSpec.from_flag(funnel) if funnel is not None else None,
        )
        return options, remaining


@dataclass
class TrackingRequest:
    event: str
    properties: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({"event": self.event, "properties": self.properties})

    def encode(self) -> str:
        encoded = base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")
        return _WHITESPACE_RE.sub("", encoded)

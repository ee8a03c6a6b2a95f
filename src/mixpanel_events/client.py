"""Synchronous Mixpanel tracking client."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import quote_plus, urlsplit

import requests

from .errors import ValidationError
from .logger import ErrorSink, StderrLogger
from .models import (
    FUNNEL_EVENT,
    FunnelSpec,
    RemoteAddressProvider,
    RecordOptions,
    TrackerOptions,
    TrackingRequest,
)


class TrackingClient:
    """Builds tracking URLs and POSTs them to the ingestion endpoint.

    Each call is independent: no queue, no retry, no shared mutable state
    besides the token and options fixed at construction.
    """

    def __init__(
        self,
        token: str,
        options: Optional[TrackerOptions] = None,
        *,
        logger: Optional[ErrorSink] = None,
        session: Optional[requests.Session] = None,
        time_fn: Optional[Callable[[], float]] = None,
    ) -> None:
        self.token = token
        self.options = options or TrackerOptions()
        self.logger = logger or StderrLogger()
        self.session = session
        self._time = time_fn or time.time

    # Record an event:
    #   client.record("Landing", {"distinct_id": 1})
    # Record a funnel goal:
    #   client.record("Landing", {"distinct_id": 1, "funnel": ["Signup", 1]})
    # Record a funnel goal and an event:
    #   client.record("Landing", {"distinct_id": 1, "funnel": ["Signup", 1], "event": True})
    def record(
        self,
        name: str,
        properties: Optional[Mapping[str, Any]] = None,
        request: Optional[RemoteAddressProvider] = None,
        *,
        options: Optional[RecordOptions] = None,
    ) -> bool:
        if options is None:
            options, props = RecordOptions.extract(properties or {})
        elif isinstance(options, RecordOptions):
            props = dict(properties or {})
        else:
            raise ValidationError("options must be a RecordOptions instance")

        ok = True
        if options.funnel is None or options.event:
            ok = self.record_event(name, props, request) and ok
        if options.funnel is not None:
            ok = (
                self.record_funnel(
                    options.funnel.funnel, options.funnel.step, name, props, request
                )
                and ok
            )
        return ok

    def record_event(
        self,
        name: str,
        properties: Optional[Mapping[str, Any]] = None,
        request: Optional[RemoteAddressProvider] = None,
    ) -> bool:
        return self._deliver(self.build_event_url(name, properties, None, request))

    def record_funnel(
        self,
        funnel: str,
        step: int,
        goal: str,
        properties: Optional[Mapping[str, Any]] = None,
        request: Optional[RemoteAddressProvider] = None,
    ) -> bool:
        return self._deliver(
            self.build_funnel_url(funnel, step, goal, properties, None, request)
        )

    def build_event_url(
        self,
        name: str,
        properties: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        request: Optional[RemoteAddressProvider] = None,
    ) -> str:
        props: Dict[str, Any] = dict(properties or {})
        props["token"] = self.token
        if props.get("time") is None:
            props["time"] = int(self._time())
        remote_ip_fn = getattr(request, "remote_ip", None)
        if callable(remote_ip_fn):
            remote_ip = remote_ip_fn()
            if props.get("ip") is None:
                props["ip"] = remote_ip
            if props.get("distinct_id") is None:
                props["distinct_id"] = remote_ip

        query: Dict[str, Any] = {"data": TrackingRequest(name, props).encode()}
        for key, value in (params or {}).items():
            if key == "data":
                continue
            query[key] = value
        query_string = "&".join(
            f"{key}={quote_plus(str(value))}" for key, value in query.items()
        )
        return f"{self.options.endpoint}/track/?{query_string}"

    def build_funnel_url(
        self,
        funnel: str,
        step: int,
        goal: str,
        properties: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        request: Optional[RemoteAddressProvider] = None,
    ) -> str:
        props = dict(properties or {})
        props.update(FunnelSpec(funnel, step).properties(goal))
        return self.build_event_url(FUNNEL_EVENT, props, params, request)

    def _deliver(self, url: str) -> bool:
        parts = urlsplit(url)
        target = f"{parts.scheme}://{parts.netloc}{parts.path}"
        try:
            if self.session is not None:
                response = self._post(self.session, target, parts.query)
            else:
                with requests.Session() as session:
                    response = self._post(session, target, parts.query)
        except requests.RequestException:
            self._report_failure(url)
            return False
        if not 200 <= response.status_code < 300:
            self._report_failure(url)
            return False
        return True

    def _post(self, session: requests.Session, target: str, body: str) -> requests.Response:
        return session.post(
            target,
            data=body,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            verify=not self.options.ssl,
        )

    def _report_failure(self, url: str) -> None:
        self.logger.error(f"Failed to log event with url:{url}")

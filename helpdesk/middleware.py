"""
Request hooks: request ids and the access log.

Every response carries an ``X-Request-ID`` header: the client's value
when one was sent, otherwise a fresh UUID.  One access-log line is
written per request once the response status is known.
"""

import logging
import time
import uuid

from flask import Flask, g, request

REQUEST_ID_HEADER = "X-Request-ID"

access_logger = logging.getLogger("helpdesk.access")


def _assign_request_id() -> None:
    g.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    g.request_started = time.perf_counter()


def _finish_request(response):
    request_id = getattr(g, "request_id", None)
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id

    started = getattr(g, "request_started", None)
    latency_ms = (time.perf_counter() - started) * 1000 if started else 0.0

    access_logger.info(
        "%s %s %d %.2fms ip=%s ua=%r request_id=%s",
        request.method,
        request.path,
        response.status_code,
        latency_ms,
        request.remote_addr,
        request.user_agent.string,
        request_id,
    )
    return response


def register_request_hooks(app: Flask) -> None:
    """Attach the request-id and access-log hooks to ``app``."""
    app.before_request(_assign_request_id)
    app.after_request(_finish_request)

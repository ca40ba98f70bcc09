"""Request identifiers.

Every inbound request gets a correlation id that is carried into
internally forwarded requests, log lines, and API responses.
"""

import time
import uuid


def make_request_id(timestamp: float | None = None) -> str:
    """Return ``<unix time with 6-digit microseconds>-<uuid4>``.

    Sortable by arrival time, unique enough for log correlation.
    Not meant to be cryptographically secure::

        >>> make_request_id(1669950476.1989)[:18]
        '1669950476.198900-'
    """
    ts = time.time() if timestamp is None else timestamp
    return f"{ts:.6f}-{uuid.uuid4()}"

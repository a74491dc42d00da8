"""Recognise the success and cancel return URLs of the hosted payment page.

URLs are parsed rather than searched, so text inside unrelated query values
(an item called "success story", say) never counts as a signal. Recognised
shapes, checked success first:

- a route containing the segments ``payment/<kind>``:
  ``saplayer://payment/success``, ``https://api.example/payment/cancel``,
  ``https://api.example/payment/success/123``;
- a ``status=<kind>`` query parameter, e.g.
  ``https://api.example/payment/return?status=success``.

``m_payment_id`` is picked up from the query whenever present.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import parse_qs, urlsplit

from ...domain.entities import ReturnSignal

SIGNAL_KINDS = ("success", "cancel")
PAYMENT_ID_PARAM = "m_payment_id"


def route_segments(url: str) -> List[str]:
    """Path segments of ``url``, with a custom scheme's host folded in.

    ``saplayer://payment/success`` has host ``payment`` and path ``/success``;
    both describe the route, so the host is treated as the first segment.
    """
    parts = urlsplit(url)
    segments = [s for s in parts.path.split("/") if s]
    if parts.scheme not in ("http", "https") and parts.netloc:
        segments.insert(0, parts.netloc)
    return [s.lower() for s in segments]


def extract_payment_id(url: str) -> Optional[str]:
    values = parse_qs(urlsplit(url).query).get(PAYMENT_ID_PARAM)
    if values and values[0]:
        return values[0]
    return None


def _matches(kind: str, segments: List[str], statuses: List[str]) -> bool:
    for first, second in zip(segments, segments[1:]):
        if first == "payment" and second == kind:
            return True
    return kind in statuses


def parse_return_url(url: str) -> ReturnSignal:
    query = parse_qs(urlsplit(url).query)
    statuses = [s.lower() for s in query.get("status", [])]
    segments = route_segments(url)
    payment_id = extract_payment_id(url)

    for kind in SIGNAL_KINDS:
        if _matches(kind, segments, statuses):
            return ReturnSignal(kind=kind, payment_id=payment_id)
    return ReturnSignal(kind="unknown", payment_id=payment_id)

"""Attempt-scoped context shared by the initiator, opener and reconciler."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Optional

from .entities import PaymentOutcome, PaymentSession
from .errors import PaymentIdAlreadySetError


class ReconcilerState(str, Enum):
    IDLE = "idle"
    AWAITING_RESULT = "awaiting_result"
    PARSING_URL = "parsing_url"
    POLLING = "polling"
    RESOLVED = "resolved"


class PaymentAttempt:
    """State owned by a single payment attempt.

    One instance is created per checkout and passed by reference to every
    stage, so the payment id outlives whatever view started the attempt and
    no two attempts share a guard.

    - ``payment_id`` is a write-once slot; the initiator is its only writer.
    - ``state`` follows Idle -> AwaitingResult -> ParsingUrl/Polling -> Resolved.
    - ``resolve`` latches the first outcome; later calls return ``False``.
    """

    def __init__(self) -> None:
        self._payment_id: Optional[str] = None
        self._session: Optional[PaymentSession] = None
        self._state = ReconcilerState.IDLE
        self._outcome: Optional[PaymentOutcome] = None
        self._resolved = asyncio.Event()

    @property
    def payment_id(self) -> Optional[str]:
        return self._payment_id

    @property
    def session(self) -> Optional[PaymentSession]:
        return self._session

    @property
    def state(self) -> ReconcilerState:
        return self._state

    @property
    def outcome(self) -> Optional[PaymentOutcome]:
        return self._outcome

    @property
    def is_resolved(self) -> bool:
        return self._state is ReconcilerState.RESOLVED

    def attach_session(self, session: PaymentSession) -> None:
        """Record the accepted session and store its id in the durable slot."""
        if session.payment_id:
            self.remember_payment_id(session.payment_id)
        self._session = session

    def remember_payment_id(self, payment_id: str) -> None:
        if self._payment_id is not None and self._payment_id != payment_id:
            raise PaymentIdAlreadySetError(
                f"Payment id already set to {self._payment_id!r}"
            )
        self._payment_id = payment_id

    def mark_awaiting_result(self) -> None:
        if self._state is ReconcilerState.IDLE:
            self._state = ReconcilerState.AWAITING_RESULT

    def mark_parsing_url(self) -> bool:
        """Enter ParsingUrl unless the attempt is already polling or resolved."""
        if self._state in (ReconcilerState.POLLING, ReconcilerState.RESOLVED):
            return False
        self._state = ReconcilerState.PARSING_URL
        return True

    def begin_polling(self) -> bool:
        """Take the polling guard.

        The check and the transition happen without yielding to the event
        loop, so of two concurrent callers only the first gets ``True``.
        """
        if self._state in (ReconcilerState.POLLING, ReconcilerState.RESOLVED):
            return False
        self._state = ReconcilerState.POLLING
        return True

    def resolve(self, outcome: PaymentOutcome) -> bool:
        if self._state is ReconcilerState.RESOLVED:
            return False
        self._state = ReconcilerState.RESOLVED
        self._outcome = outcome
        self._resolved.set()
        return True

    async def wait_resolved(self) -> PaymentOutcome:
        await self._resolved.wait()
        assert self._outcome is not None
        return self._outcome

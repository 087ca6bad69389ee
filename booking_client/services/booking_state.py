"""
Booking state manager with optimistic mutations.

OPTIMISTIC MUTATION PROTOCOL
============================

Problem:
  A remote call takes a round trip, but the UI should show the result of
  "register" or "cancel" right away. If the call fails, the list on screen
  must go back to what it was before.

Solution:
  Every mutating operation runs in three steps.

  1. Apply the change to the local collection synchronously
     (append a pending record / remove the cancelled one)
  2. Await the remote call
  3. Success: reconcile with the server's canonical record.
     Failure: revert the local change, log it, return a FAILED outcome.

  Refresh has no speculative step: it replaces the collection wholesale.

Concurrency:
  Everything runs on one event loop. Collection edits never interleave,
  but continuations of overlapping operations resume in any order. So
  nothing is located by a captured index after an await: reconciliation
  finds the pending record by its client id, and cancel rollback finds its
  old neighbours by id.

  Known race: the duplicate check only sees the collection at call time,
  not requests in flight. A refresh that lands while a register is pending
  drops the pending record, so a second register for the same event gets
  through and the server ends up with two bookings.
"""

import asyncio
import time
from typing import Any, Callable, Optional

import httpx
from pydantic import TypeAdapter

from booking_client.core.config import get_settings
from booking_client.core.errors import (
    AlreadyRegisteredError,
    BookingNotFoundError,
    RemoteCallError,
)
from booking_client.core.logging import get_logger
from booking_client.core.metrics import (
    observe_remote_call,
    record_operation,
    record_rollback,
    set_tracked_bookings,
)
from booking_client.infrastructure.http_client import HttpClient
from booking_client.schemas.booking import (
    Booking,
    BookingId,
    EventRef,
    STATUS_CONFIRMED,
    STATUS_PENDING,
)
from booking_client.schemas.outcome import BookingOutcome, OutcomeStatus
from booking_client.services.interfaces.error_reporting import ErrorReportingPolicy
from booking_client.services.policy_factory import get_error_policy

logger = get_logger(__name__)

BOOKINGS_PATH = "/bookings"

_booking_list = TypeAdapter(list[Booking])

Listener = Callable[["BookingStateManager"], None]


def _same_id(left: Any, right: Any) -> bool:
    # Servers may echo numeric ids as strings
    return str(left) == str(right)


class BookingStateManager:
    """
    Owns the current user's booking collection plus the shared
    loading flag and error slot.

    Observers read `bookings`, `loading` and `error`, or subscribe()
    to be called after every change. Only the manager writes.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_id: Optional[Any] = None,
        policy: Optional[ErrorReportingPolicy] = None,
    ):
        self._client = client
        self.user_id = user_id if user_id is not None else get_settings().CURRENT_USER_ID
        self._log = logger.bind(user_id=self.user_id)
        self._policy = policy or get_error_policy()
        self._bookings: list[Booking] = []
        self._refreshes_in_flight = 0
        self._error: Optional[Exception] = None
        self._listeners: list[Listener] = []
        self._last_client_id = 0
        # Client id -> server record, for registers that resolved after their
        # pending record was removed by a cancel still in flight
        self._confirmed_while_removed: dict[str, Booking] = {}

    @property
    def bookings(self) -> list[Booking]:
        return list(self._bookings)

    @property
    def loading(self) -> bool:
        """True while at least one refresh is in flight."""
        return self._refreshes_in_flight > 0

    @property
    def error(self) -> Optional[Exception]:
        return self._error

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(manager)` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def find_booking_by_id(self, booking_id: BookingId) -> int:
        """Index of the first booking with this id, or -1."""
        for index, booking in enumerate(self._bookings):
            if booking.id == booking_id:
                return index
        return -1

    async def refresh(self) -> BookingOutcome:
        """Replace the collection with the server's booking list."""
        self._refreshes_in_flight += 1
        self._error = None
        self._changed()

        try:
            response = await self._send("refresh", "GET", BOOKINGS_PATH)
            if not response.is_success:
                raise RemoteCallError("refresh", response.status_code, "Failed to load bookings")
            self._bookings = _booking_list.validate_python(response.json())
        except Exception as e:
            self._log.error("bookings_refresh_failed", error=str(e))
            return self._failed("refresh", e)
        finally:
            self._refreshes_in_flight -= 1
            self._changed()

        self._log.info("bookings_refreshed", count=len(self._bookings))
        record_operation("refresh", OutcomeStatus.SUCCESS.value)
        return BookingOutcome("refresh", OutcomeStatus.SUCCESS)

    async def register(self, event: Any) -> BookingOutcome:
        """
        Book an event for the current user.

        `event` is an EventRef, a mapping or any object with `id` and
        `title`. Invalid input raises pydantic.ValidationError before
        anything changes. Remote failures never raise.
        """
        event = EventRef.model_validate(event)

        if any(
            _same_id(b.event_id, event.id) and _same_id(b.user_id, self.user_id)
            for b in self._bookings
        ):
            self._log.warning("booking_duplicate_rejected", event_id=event.id)
            record_operation("register", OutcomeStatus.DUPLICATE.value)
            return BookingOutcome(
                "register",
                OutcomeStatus.DUPLICATE,
                error=AlreadyRegisteredError(event.id),
            )

        # Step 1: Optimistic insert, visible before the server answers
        pending = Booking(
            id=self._next_client_id(),
            user_id=self.user_id,
            event_id=event.id,
            event_title=event.title,
            status=STATUS_PENDING,
        )
        self._bookings.append(pending)
        self._changed()

        # Step 2: Ask the server for a confirmed booking
        try:
            response = await self._send(
                "register",
                "POST",
                BOOKINGS_PATH,
                pending.to_payload(status=STATUS_CONFIRMED),
            )
            if not response.is_success:
                raise RemoteCallError("register", response.status_code, "Failed to confirm booking")
            confirmed = Booking.model_validate(response.json())
        except asyncio.CancelledError:
            self._log.warning("booking_registration_interrupted", event_id=event.id, client_id=pending.id)
            self._bookings = [b for b in self._bookings if b.id != pending.id]
            record_rollback("register")
            self._changed()
            raise
        except Exception as e:
            self._log.error(
                "booking_registration_failed",
                event_id=event.id,
                client_id=pending.id,
                error=str(e),
            )
            self._bookings = [b for b in self._bookings if b.id != pending.id]
            record_rollback("register")
            self._changed()
            return self._failed("register", e)

        # Step 3: Reconcile in place with the canonical record
        index = self.find_booking_by_id(pending.id)
        if index == -1:
            # Removed while in flight (cancel or refresh); don't resurrect it.
            # A failing cancel puts the server record back instead of the pending one.
            self._confirmed_while_removed[pending.id] = confirmed
            self._log.warning(
                "booking_reconcile_target_missing",
                client_id=pending.id,
                booking_id=confirmed.id,
            )
        else:
            self._bookings[index] = confirmed
            self._changed()

        self._log.info(
            "booking_registered",
            booking_id=confirmed.id,
            client_id=pending.id,
            event_id=confirmed.event_id,
        )
        record_operation("register", OutcomeStatus.SUCCESS.value)
        return BookingOutcome("register", OutcomeStatus.SUCCESS, booking=confirmed)

    async def cancel(self, booking_id: BookingId) -> BookingOutcome:
        """Cancel a booking; restored in place if the server refuses."""
        index = self.find_booking_by_id(booking_id)
        if index == -1:
            self._log.warning("booking_cancel_unknown_id", booking_id=booking_id)
            record_operation("cancel", OutcomeStatus.NOT_FOUND.value)
            return BookingOutcome(
                "cancel",
                OutcomeStatus.NOT_FOUND,
                error=BookingNotFoundError(booking_id),
            )

        original = self._bookings[index]
        before_id = self._bookings[index - 1].id if index > 0 else None
        after_id = self._bookings[index + 1].id if index + 1 < len(self._bookings) else None

        # Optimistic delete
        del self._bookings[index]
        self._changed()

        try:
            response = await self._send("cancel", "DELETE", f"{BOOKINGS_PATH}/{booking_id}")
            if not response.is_success:
                raise RemoteCallError("cancel", response.status_code, "Booking could not be cancelled.")
        except asyncio.CancelledError:
            self._log.warning("booking_cancellation_interrupted", booking_id=booking_id)
            self._restore(original, index, before_id, after_id)
            record_rollback("cancel")
            raise
        except Exception as e:
            self._log.error("booking_cancellation_failed", booking_id=booking_id, error=str(e))
            self._restore(original, index, before_id, after_id)
            record_rollback("cancel")
            return self._failed("cancel", e)

        self._confirmed_while_removed.pop(booking_id, None)
        self._log.info("booking_cancelled", booking_id=booking_id, event_id=original.event_id)
        record_operation("cancel", OutcomeStatus.SUCCESS.value)
        return BookingOutcome("cancel", OutcomeStatus.SUCCESS, booking=original)

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        payload: Optional[dict] = None,
    ) -> httpx.Response:
        start_time = time.perf_counter()
        try:
            return await self._client.request(method, path, json=payload)
        finally:
            elapsed = time.perf_counter() - start_time
            observe_remote_call(operation, elapsed)
            self._log.debug(
                "remote_call_completed",
                operation=operation,
                method=method,
                path=path,
                duration_ms=round(elapsed * 1000, 2),
            )

    def _restore(
        self,
        booking: Booking,
        index: int,
        before_id: Optional[BookingId],
        after_id: Optional[BookingId],
    ) -> None:
        """Reinsert a cancelled booking next to whichever old neighbour is still there."""
        confirmed = self._confirmed_while_removed.pop(booking.id, None)
        if confirmed is not None:
            booking = confirmed

        if self.find_booking_by_id(booking.id) != -1:
            # A refresh brought it back already
            self._log.info("booking_rollback_skipped", booking_id=booking.id, reason="already_present")
            return

        anchor = self.find_booking_by_id(before_id) if before_id is not None else -1
        if anchor != -1:
            position = anchor + 1
        else:
            anchor = self.find_booking_by_id(after_id) if after_id is not None else -1
            position = anchor if anchor != -1 else min(index, len(self._bookings))

        self._bookings.insert(position, booking)
        self._log.info("booking_rolled_back", booking_id=booking.id, position=position)
        self._changed()

    def _failed(self, operation: str, error: Exception) -> BookingOutcome:
        if self._policy.publishes(operation):
            self._error = error
            self._changed()
        record_operation(operation, OutcomeStatus.FAILED.value)
        return BookingOutcome(operation, OutcomeStatus.FAILED, error=error)

    def _next_client_id(self) -> str:
        # Millisecond clock, forced strictly increasing
        now_ms = time.time_ns() // 1_000_000
        self._last_client_id = max(now_ms, self._last_client_id + 1)
        return str(self._last_client_id)

    def _changed(self) -> None:
        set_tracked_bookings(len(self._bookings))
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                self._log.error("booking_listener_failed", error=str(e))


# Singleton instance
_manager: Optional[BookingStateManager] = None


def get_booking_manager() -> BookingStateManager:
    """Get the process-wide booking state manager."""
    global _manager
    if _manager is None:
        _manager = BookingStateManager(HttpClient.get_client())
    return _manager


async def close_booking_manager() -> None:
    """Drop the process-wide manager and close its HTTP client."""
    global _manager
    _manager = None
    await HttpClient.close()

"""
End-to-end flows against the in-memory booking service.
"""

import asyncio

import pytest
from fastapi import FastAPI

from booking_client.schemas.outcome import OutcomeStatus
from booking_client.services.booking_state import BookingStateManager

from conftest import Gate, settle


@pytest.mark.asyncio
async def test_register_then_refresh(api_manager: BookingStateManager, booking_api: FastAPI):
    """Confirmed booking is stored server-side and survives a refresh."""
    outcome = await api_manager.register({"id": "e1", "title": "Concert"})

    assert outcome.ok
    assert outcome.booking.id == "b1"
    assert outcome.booking.status == "confirmed"
    assert booking_api.state.bookings[0]["status"] == "confirmed"

    await api_manager.refresh()
    assert [b.id for b in api_manager.bookings] == ["b1"]


@pytest.mark.asyncio
async def test_refresh_loads_existing_bookings(api_manager: BookingStateManager, booking_api: FastAPI):
    booking_api.state.bookings = [
        {"id": "b7", "userId": 1, "eventId": "e7", "eventTitle": "Jazz Night", "status": "confirmed"},
    ]

    outcome = await api_manager.refresh()

    assert outcome.ok
    assert api_manager.bookings[0].event_title == "Jazz Night"
    assert api_manager.loading is False


@pytest.mark.asyncio
async def test_duplicate_after_refresh(api_manager: BookingStateManager, booking_api: FastAPI):
    booking_api.state.bookings = [
        {"id": "b7", "userId": 1, "eventId": "e7", "eventTitle": "Jazz Night", "status": "confirmed"},
    ]
    await api_manager.refresh()

    outcome = await api_manager.register({"id": "e7", "title": "Jazz Night"})

    assert outcome.status is OutcomeStatus.DUPLICATE
    assert len(booking_api.state.bookings) == 1


@pytest.mark.asyncio
async def test_register_and_cancel(api_manager: BookingStateManager, booking_api: FastAPI):
    registered = await api_manager.register({"id": "e1", "title": "Concert"})

    outcome = await api_manager.cancel(registered.booking.id)

    assert outcome.ok
    assert api_manager.bookings == []
    assert booking_api.state.bookings == []


@pytest.mark.asyncio
async def test_service_outage_rolls_back_writes(api_manager: BookingStateManager, booking_api: FastAPI):
    """Both writes fail and leave the list as it was."""
    registered = await api_manager.register({"id": "e1", "title": "Concert"})
    before = api_manager.bookings
    booking_api.state.fail_writes = True

    failed_register = await api_manager.register({"id": "e2", "title": "Play"})
    failed_cancel = await api_manager.cancel(registered.booking.id)

    assert failed_register.status is OutcomeStatus.FAILED
    assert failed_register.error.status_code == 503
    assert failed_cancel.status is OutcomeStatus.FAILED
    assert api_manager.bookings == before
    assert api_manager.error is None


@pytest.mark.asyncio
async def test_cancel_of_unconfirmed_id_is_rolled_back(api_manager: BookingStateManager, booking_api: FastAPI):
    """The server never heard of a client-side id, so the delete is refused."""
    gate = Gate()
    booking_api.state.write_gate = gate

    registering = asyncio.create_task(api_manager.register({"id": "e1", "title": "Concert"}))
    await settle()
    client_id = api_manager.bookings[0].id

    outcome = await api_manager.cancel(client_id)

    assert outcome.status is OutcomeStatus.FAILED
    assert outcome.error.status_code == 404
    assert [(b.id, b.status) for b in api_manager.bookings] == [(client_id, "pending")]

    # The register still confirms the restored record in place
    gate.release()
    await registering
    assert [(b.id, b.status) for b in api_manager.bookings] == [("b1", "confirmed")]

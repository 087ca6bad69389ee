"""
Pytest fixtures for the booking state manager.

Two kinds of transport:
- httpx.MockTransport with a scripted handler, for exact control over
  failures and over when a response is released
- an in-memory FastAPI booking service over ASGITransport, standing in
  for the real booking API in end-to-end flows
"""

import asyncio
import itertools
from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import Body, FastAPI, HTTPException, status

from booking_client.services.booking_state import BookingStateManager
from booking_client.services.interfaces import RefreshOnlyReporting

BASE_URL = "http://test"
CURRENT_USER = 1


def create_booking_api() -> FastAPI:
    """Booking store with json-server semantics, held in app.state."""
    app = FastAPI()
    app.state.bookings = []
    app.state.fail_writes = False
    app.state.write_gate = None
    ids = itertools.count(1)

    @app.get("/bookings")
    async def list_bookings():
        return app.state.bookings

    @app.post("/bookings", status_code=status.HTTP_201_CREATED)
    async def create_booking(payload: dict = Body(...)):
        if app.state.write_gate is not None:
            await app.state.write_gate.wait()
        if app.state.fail_writes:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Unavailable")
        record = {**payload, "id": f"b{next(ids)}"}
        app.state.bookings.append(record)
        return record

    @app.delete("/bookings/{booking_id}")
    async def delete_booking(booking_id: str):
        if app.state.fail_writes:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Unavailable")
        remaining = [b for b in app.state.bookings if str(b["id"]) != booking_id]
        if len(remaining) == len(app.state.bookings):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
        app.state.bookings = remaining
        return {}

    return app


class Gate:
    """Holds scripted responses until the test releases them."""

    def __init__(self):
        self._released = asyncio.Event()

    async def wait(self):
        await self._released.wait()

    def release(self):
        self._released.set()


def make_manager(handler: Callable, policy=None) -> BookingStateManager:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return BookingStateManager(client, user_id=CURRENT_USER, policy=policy or RefreshOnlyReporting())


def booking_json(booking_id, event_id, title="Concert", status_value="confirmed") -> dict:
    return {
        "id": booking_id,
        "userId": CURRENT_USER,
        "eventId": event_id,
        "eventTitle": title,
        "status": status_value,
    }


async def settle():
    """Let pending tasks run up to their next real suspension point."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def requests_seen() -> list:
    return []


@pytest.fixture
def booking_api() -> FastAPI:
    return create_booking_api()


@pytest_asyncio.fixture(scope="function")
async def api_manager(booking_api: FastAPI) -> AsyncGenerator[BookingStateManager, None]:
    """Manager talking to the in-memory booking service."""
    transport = httpx.ASGITransport(app=booking_api)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield BookingStateManager(client, user_id=CURRENT_USER, policy=RefreshOnlyReporting())

import asyncio
from collections import deque

import pytest

from proxmox_wake.domain.events import ControllerEvent
from proxmox_wake.domain.listener import InputListener
from proxmox_wake.ports.controller import ControllerInfo

VM_ID = "100"
TRIGGER = "axis5"


class FakeGuestControl:
    def __init__(
        self,
        statuses: list[bool] | None = None,
        wake_results: list[bool] | None = None,
    ) -> None:
        self._statuses = deque(statuses or [])
        self._wake_results = deque(wake_results or [])
        self.status_calls: list[str] = []
        self.wake_calls: list[str] = []
        self.running_after_wake = False
        self._woken = False

    async def is_running(self, vm_id: str) -> bool:
        self.status_calls.append(vm_id)
        if self._statuses:
            return self._statuses.popleft()
        return self.running_after_wake and self._woken

    async def start(self, vm_id: str) -> bool:
        self.wake_calls.append(vm_id)
        result = self._wake_results.popleft() if self._wake_results else True
        if result:
            self._woken = True
        return result

    def queue_statuses(self, statuses: list[bool]) -> None:
        self._statuses.extend(statuses)

    def queue_wake_results(self, results: list[bool]) -> None:
        self._wake_results.extend(results)


class FakeControllerInput:
    """Each queued batch is returned by successive polls, followed by one None."""

    def __init__(self, devices: list[ControllerInfo] | None = None) -> None:
        self._pending: deque[ControllerEvent | None] = deque()
        self._devices = devices or []
        self.open_count = 0
        self.close_count = 0
        self.poll_count = 0

    @property
    def is_open(self) -> bool:
        return self.open_count > self.close_count

    def open(self) -> None:
        self.open_count += 1

    def close(self) -> None:
        self.close_count += 1

    def poll(self) -> ControllerEvent | None:
        self.poll_count += 1
        if not self._pending:
            return None
        return self._pending.popleft()

    def connected_devices(self) -> list[ControllerInfo]:
        return list(self._devices)

    def queue_events(self, events: list[ControllerEvent]) -> None:
        self._pending.extend(events)
        self._pending.append(None)

    def queue_idle(self, iterations: int) -> None:
        self._pending.extend([None] * iterations)

    @property
    def remaining(self) -> int:
        return sum(1 for e in self._pending if e is not None)


class FakeSleep:
    """Records requested sleeps and cancels the caller after ``limit`` of them."""

    def __init__(self, limit: int | None = None) -> None:
        self.limit = limit
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.limit is not None and len(self.calls) >= self.limit:
            raise asyncio.CancelledError()


@pytest.fixture
def fake_guest():
    return FakeGuestControl()


@pytest.fixture
def fake_controller():
    return FakeControllerInput()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def listener(fake_controller, fake_guest, fake_sleep):
    return InputListener(
        vm_id=VM_ID,
        controller=fake_controller,
        guest_status=fake_guest,
        guest_wake=fake_guest,
        trigger_button=TRIGGER,
        sleep_seconds=0.01,
        status_check_iterations=100,
        sleep=fake_sleep,
    )

import asyncio
import logging
from collections.abc import Awaitable, Callable

from proxmox_wake.domain.events import (
    ButtonPressed,
    ControllerConnected,
    ControllerDisconnected,
    ControllerEvent,
)
from proxmox_wake.domain.schedule import CheckSchedule, IterationCheckSchedule
from proxmox_wake.ports.controller import ControllerInputPort
from proxmox_wake.ports.guest import GuestStatusPort, GuestWakePort

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class InputListener:
    def __init__(
        self,
        vm_id: str,
        controller: ControllerInputPort,
        guest_status: GuestStatusPort,
        guest_wake: GuestWakePort,
        trigger_button: str = "axis5",
        sleep_seconds: float = 0.01,
        status_check_iterations: int = 100,
        schedule_factory: Callable[[], CheckSchedule] | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._vm_id = vm_id
        self._controller = controller
        self._guest_status = guest_status
        self._guest_wake = guest_wake
        self._trigger_button = trigger_button
        self._sleep_seconds = sleep_seconds
        self._schedule_factory = schedule_factory or (
            lambda: IterationCheckSchedule(every=status_check_iterations)
        )
        self._sleep = sleep

    async def listen(self) -> None:
        self._controller.open()
        try:
            logger.info(
                "Listening for %s press on VM %s. Press Ctrl+C to exit.",
                self._trigger_button,
                self._vm_id,
            )
            await self._loop()
        finally:
            self._controller.close()

    async def _loop(self) -> None:
        schedule = self._schedule_factory()

        while True:
            if schedule.due() and await self._guest_status.is_running(self._vm_id):
                logger.info(
                    "VM %s is now running. Stopping joystick listener to allow USB passthrough.",
                    self._vm_id,
                )
                return

            while (event := self._controller.poll()) is not None:
                if await self._handle_event(event):
                    return

            await self._sleep(self._sleep_seconds)

    async def _handle_event(self, event: ControllerEvent) -> bool:
        if isinstance(event, ButtonPressed) and event.button == self._trigger_button:
            logger.info("Trigger %s pressed! Attempting to wake VM %s...", event.button, self._vm_id)
            if await self._guest_wake.start(self._vm_id):
                logger.info("VM started successfully. Stopping joystick listener for USB passthrough.")
                return True
            logger.warning("Failed to wake VM %s, press %s again to retry", self._vm_id, event.button)
        elif isinstance(event, ControllerConnected):
            logger.info("Gamepad connected: %s (ID: %d)", event.name, event.device_id)
        elif isinstance(event, ControllerDisconnected):
            logger.info("Gamepad disconnected (ID: %d)", event.device_id)
        return False

import asyncio
import logging

from proxmox_wake.domain.listener import InputListener, Sleeper
from proxmox_wake.domain.state import SupervisorState, validate_transition
from proxmox_wake.ports.guest import GuestStatusPort

logger = logging.getLogger(__name__)


class Supervisor:
    def __init__(
        self,
        vm_id: str,
        guest_status: GuestStatusPort,
        listener: InputListener,
        status_poll_seconds: float = 10.0,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._vm_id = vm_id
        self._guest_status = guest_status
        self._listener = listener
        self._status_poll_seconds = status_poll_seconds
        self._sleep = sleep
        self._state: SupervisorState | None = None

    @property
    def state(self) -> SupervisorState | None:
        return self._state

    def _transition_to(self, target: SupervisorState) -> None:
        if self._state is target:
            return
        if self._state is not None:
            validate_transition(self._state, target)
            logger.info("State: %s -> %s", self._state.name, target.name)
        else:
            logger.info("State: %s", target.name)
        self._state = target

    async def run(self) -> None:
        logger.info("Monitoring VM %s status continuously...", self._vm_id)
        try:
            while True:
                await self.run_cycle()
        except asyncio.CancelledError:
            logger.info("Supervisor cancelled")
            raise

    async def run_cycle(self) -> None:
        if await self._guest_status.is_running(self._vm_id):
            self._transition_to(SupervisorState.VM_RUNNING)
            logger.info("VM %s is running. Monitoring for VM shutdown...", self._vm_id)
            await self._wait_for_stop()
            logger.info("VM %s has stopped. Starting joystick listener...", self._vm_id)
        else:
            logger.info("VM %s is stopped. Starting joystick listener...", self._vm_id)

        self._transition_to(SupervisorState.VM_STOPPED)
        await self._listener.listen()
        logger.info("Joystick listener stopped. Resuming VM monitoring...")

    async def _wait_for_stop(self) -> None:
        while True:
            await self._sleep(self._status_poll_seconds)
            if not await self._guest_status.is_running(self._vm_id):
                return

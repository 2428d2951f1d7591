from typing import Protocol


class GuestStatusPort(Protocol):
    async def is_running(self, vm_id: str) -> bool: ...


class GuestWakePort(Protocol):
    async def start(self, vm_id: str) -> bool: ...

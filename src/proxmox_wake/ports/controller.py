from dataclasses import dataclass
from typing import Protocol

from proxmox_wake.domain.events import ControllerEvent


@dataclass(frozen=True)
class ControllerInfo:
    device_id: int
    name: str


class ControllerInputPort(Protocol):
    def open(self) -> None: ...
    def close(self) -> None: ...
    def poll(self) -> ControllerEvent | None: ...
    def connected_devices(self) -> list[ControllerInfo]: ...

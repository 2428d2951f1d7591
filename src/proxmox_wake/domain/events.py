from dataclasses import dataclass, field
from time import time


@dataclass(frozen=True)
class ControllerEvent:
    timestamp: float = field(default_factory=time)


@dataclass(frozen=True)
class ControllerConnected(ControllerEvent):
    device_id: int = -1
    name: str = ""


@dataclass(frozen=True)
class ControllerDisconnected(ControllerEvent):
    device_id: int = -1


@dataclass(frozen=True)
class ButtonPressed(ControllerEvent):
    device_id: int = -1
    button: str = ""
    value: float = 1.0


@dataclass(frozen=True)
class ButtonReleased(ControllerEvent):
    device_id: int = -1
    button: str = ""
    value: float = 0.0


@dataclass(frozen=True)
class OtherInput(ControllerEvent):
    kind: str = ""

import logging
import os

import pygame

from proxmox_wake.domain.errors import InputBackendError
from proxmox_wake.domain.events import (
    ButtonPressed,
    ButtonReleased,
    ControllerConnected,
    ControllerDisconnected,
    ControllerEvent,
    OtherInput,
)
from proxmox_wake.ports.controller import ControllerInfo

logger = logging.getLogger(__name__)

TRIGGER_RELEASE_HYSTERESIS = 0.2


def button_name(index: int) -> str:
    return f"button{index}"


def axis_name(index: int) -> str:
    return f"axis{index}"


class AxisTriggerTracker:
    """Turns analog axis motion into digital press/release transitions.

    A press fires once when the value rises to ``threshold``; the matching
    release fires when it falls below ``threshold - TRIGGER_RELEASE_HYSTERESIS``.
    """

    def __init__(self, threshold: float = 0.5) -> None:
        self._press_threshold = threshold
        self._release_threshold = threshold - TRIGGER_RELEASE_HYSTERESIS
        self._pressed: set[tuple[int, int]] = set()

    def update(self, device_id: int, axis: int, value: float) -> bool | None:
        key = (device_id, axis)
        if key not in self._pressed and value >= self._press_threshold:
            self._pressed.add(key)
            return True
        if key in self._pressed and value < self._release_threshold:
            self._pressed.discard(key)
            return False
        return None

    def forget(self, device_id: int) -> None:
        self._pressed = {key for key in self._pressed if key[0] != device_id}


class PygameControllerInput:
    def __init__(self, trigger_threshold: float = 0.5) -> None:
        self._trigger_threshold = trigger_threshold
        self._axes = AxisTriggerTracker(trigger_threshold)
        self._joysticks: dict[int, "pygame.joystick.JoystickType"] = {}
        self._opened = False

    def open(self) -> None:
        if self._opened:
            return
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        os.environ.setdefault("SDL_JOYSTICK_ALLOW_BACKGROUND_EVENTS", "1")
        try:
            pygame.display.init()
            pygame.joystick.init()
        except pygame.error as exc:
            raise InputBackendError(f"Failed to initialize gamepad support: {exc}") from exc
        self._opened = True
        logger.debug("pygame joystick subsystem initialized")

    def close(self) -> None:
        if not self._opened:
            return
        for joystick in self._joysticks.values():
            joystick.quit()
        self._joysticks.clear()
        self._axes = AxisTriggerTracker(self._trigger_threshold)
        pygame.joystick.quit()
        pygame.display.quit()
        self._opened = False
        logger.debug("pygame joystick subsystem released")

    def poll(self) -> ControllerEvent | None:
        event = pygame.event.poll()
        if event.type == pygame.NOEVENT:
            return None
        return self._translate(event)

    def connected_devices(self) -> list[ControllerInfo]:
        devices = []
        for index in range(pygame.joystick.get_count()):
            joystick = pygame.joystick.Joystick(index)
            devices.append(ControllerInfo(device_id=joystick.get_instance_id(), name=joystick.get_name()))
        return devices

    def _translate(self, event: pygame.event.Event) -> ControllerEvent:
        if event.type == pygame.JOYDEVICEADDED:
            try:
                joystick = pygame.joystick.Joystick(event.device_index)
                joystick.init()
            except pygame.error as exc:
                logger.warning("Could not open gamepad %d: %s", event.device_index, exc)
                return OtherInput(kind=pygame.event.event_name(event.type))
            device_id = joystick.get_instance_id()
            self._joysticks[device_id] = joystick
            return ControllerConnected(device_id=device_id, name=joystick.get_name())

        if event.type == pygame.JOYDEVICEREMOVED:
            joystick = self._joysticks.pop(event.instance_id, None)
            if joystick is not None:
                joystick.quit()
            self._axes.forget(event.instance_id)
            return ControllerDisconnected(device_id=event.instance_id)

        if event.type == pygame.JOYBUTTONDOWN:
            return ButtonPressed(device_id=event.instance_id, button=button_name(event.button), value=1.0)

        if event.type == pygame.JOYBUTTONUP:
            return ButtonReleased(device_id=event.instance_id, button=button_name(event.button), value=0.0)

        if event.type == pygame.JOYAXISMOTION:
            transition = self._axes.update(event.instance_id, event.axis, event.value)
            if transition is True:
                return ButtonPressed(device_id=event.instance_id, button=axis_name(event.axis), value=event.value)
            if transition is False:
                return ButtonReleased(device_id=event.instance_id, button=axis_name(event.axis), value=event.value)

        return OtherInput(kind=pygame.event.event_name(event.type))

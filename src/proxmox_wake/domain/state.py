from enum import Enum, auto


class SupervisorState(Enum):
    VM_RUNNING = auto()
    VM_STOPPED = auto()


VALID_TRANSITIONS: dict[SupervisorState, set[SupervisorState]] = {
    SupervisorState.VM_RUNNING: {SupervisorState.VM_STOPPED},
    SupervisorState.VM_STOPPED: {SupervisorState.VM_RUNNING},
}


class InvalidTransitionError(Exception):
    pass


def validate_transition(current: SupervisorState, target: SupervisorState) -> None:
    if target not in VALID_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Cannot transition from {current.name} to {target.name}")

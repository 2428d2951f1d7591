import logging

from proxmox_wake.adapters.pygame_input import PygameControllerInput
from proxmox_wake.adapters.qm_guest import QmGuestControl
from proxmox_wake.config import WakeOnJoystickConfig
from proxmox_wake.domain.listener import InputListener
from proxmox_wake.domain.supervisor import Supervisor

logger = logging.getLogger(__name__)


def create_guest_control(config: WakeOnJoystickConfig) -> QmGuestControl:
    return QmGuestControl(command=config.qm_command, timeout=config.command_timeout_seconds)


def create_controller_input(config: WakeOnJoystickConfig) -> PygameControllerInput:
    return PygameControllerInput(trigger_threshold=config.trigger_threshold)


def create_supervisor(
    config: WakeOnJoystickConfig,
    guest: QmGuestControl | None = None,
    controller: PygameControllerInput | None = None,
) -> Supervisor:
    guest = guest or create_guest_control(config)
    controller = controller or create_controller_input(config)

    listener = InputListener(
        vm_id=config.vm_id,
        controller=controller,
        guest_status=guest,
        guest_wake=guest,
        trigger_button=config.trigger_button,
        sleep_seconds=config.listener_sleep_seconds,
        status_check_iterations=config.status_check_iterations,
    )

    logger.debug(
        "Supervisor for VM %s (trigger=%s, poll=%.1fs, check every %d iterations)",
        config.vm_id,
        config.trigger_button,
        config.status_poll_seconds,
        config.status_check_iterations,
    )

    return Supervisor(
        vm_id=config.vm_id,
        guest_status=guest,
        listener=listener,
        status_poll_seconds=config.status_poll_seconds,
    )

import logging
import shlex
import shutil
from dataclasses import dataclass

from proxmox_wake.config import WakeOnJoystickConfig
from proxmox_wake.domain.errors import InputBackendError
from proxmox_wake.ports.controller import ControllerInputPort
from proxmox_wake.ports.guest import GuestStatusPort

logger = logging.getLogger(__name__)

CRITICAL_CHECKS = {"input_backend"}


@dataclass
class HealthCheckResult:
    name: str
    passed: bool
    detail: str


async def run_startup_checks(
    config: WakeOnJoystickConfig,
    controller: ControllerInputPort,
    guest_status: GuestStatusPort,
) -> list[HealthCheckResult]:
    results = [
        _check_input_backend(controller),
        _check_qm_command(config),
        await _check_guest_status(config, guest_status),
    ]

    passed = sum(1 for r in results if r.passed)

    logger.info("Health check: %d/%d passed", passed, len(results))
    for result in results:
        level = logging.INFO if result.passed else logging.WARNING
        symbol = "OK" if result.passed else "FAIL"
        logger.log(level, "  [%s] %s: %s", symbol, result.name, result.detail)

    return results


def has_critical_failures(results: list[HealthCheckResult]) -> bool:
    return any(not r.passed and r.name in CRITICAL_CHECKS for r in results)


def _check_input_backend(controller: ControllerInputPort) -> HealthCheckResult:
    name = "input_backend"
    try:
        controller.open()
    except InputBackendError as exc:
        return HealthCheckResult(name=name, passed=False, detail=str(exc))
    try:
        devices = controller.connected_devices()
    finally:
        controller.close()

    if not devices:
        return HealthCheckResult(name=name, passed=True, detail="Initialized, no controllers connected yet")
    names = ", ".join(d.name for d in devices)
    return HealthCheckResult(name=name, passed=True, detail=f"{len(devices)} controller(s): {names}")


def _check_qm_command(config: WakeOnJoystickConfig) -> HealthCheckResult:
    name = "qm_command"
    parts = shlex.split(config.qm_command)
    executable = parts[0] if parts else ""
    path = shutil.which(executable) if executable else None
    if path is None:
        return HealthCheckResult(
            name=name,
            passed=False,
            detail=f"'{executable}' not found on PATH, VM will be treated as stopped",
        )
    return HealthCheckResult(name=name, passed=True, detail=path)


async def _check_guest_status(
    config: WakeOnJoystickConfig, guest_status: GuestStatusPort
) -> HealthCheckResult:
    running = await guest_status.is_running(config.vm_id)
    return HealthCheckResult(
        name="guest_status",
        passed=True,
        detail=f"VM {config.vm_id} is {'running' if running else 'stopped'}",
    )

import pytest

from proxmox_wake.config import WakeOnJoystickConfig
from proxmox_wake.domain.errors import InputBackendError
from proxmox_wake.health import has_critical_failures, run_startup_checks
from proxmox_wake.ports.controller import ControllerInfo

from conftest import FakeControllerInput


class BrokenControllerInput(FakeControllerInput):
    def open(self) -> None:
        raise InputBackendError("Failed to initialize gamepad support: no joystick subsystem")


def _by_name(results):
    return {r.name: r for r in results}


class TestStartupChecks:
    @pytest.mark.asyncio
    async def test_all_pass(self, fake_guest):
        config = WakeOnJoystickConfig(vm_id="100", qm_command="sh")
        controller = FakeControllerInput(devices=[ControllerInfo(device_id=0, name="Xbox Controller")])
        fake_guest.queue_statuses([True])

        results = await run_startup_checks(config, controller, fake_guest)

        checks = _by_name(results)
        assert all(r.passed for r in results)
        assert "Xbox Controller" in checks["input_backend"].detail
        assert checks["guest_status"].detail == "VM 100 is running"
        assert not controller.is_open
        assert not has_critical_failures(results)

    @pytest.mark.asyncio
    async def test_no_controllers_is_not_a_failure(self, fake_guest, fake_controller):
        config = WakeOnJoystickConfig(qm_command="sh")
        results = await run_startup_checks(config, fake_controller, fake_guest)
        assert _by_name(results)["input_backend"].passed

    @pytest.mark.asyncio
    async def test_broken_input_backend_is_critical(self, fake_guest):
        config = WakeOnJoystickConfig(qm_command="sh")
        results = await run_startup_checks(config, BrokenControllerInput(), fake_guest)
        assert not _by_name(results)["input_backend"].passed
        assert has_critical_failures(results)

    @pytest.mark.asyncio
    async def test_missing_qm_is_not_critical(self, fake_guest, fake_controller):
        config = WakeOnJoystickConfig(qm_command="definitely-not-a-real-qm-binary")
        results = await run_startup_checks(config, fake_controller, fake_guest)
        assert not _by_name(results)["qm_command"].passed
        assert not has_critical_failures(results)

    @pytest.mark.asyncio
    async def test_quoted_qm_path_with_spaces(self, tmp_path, fake_guest, fake_controller):
        tools = tmp_path / "proxmox tools"
        tools.mkdir()
        script = tools / "qm"
        script.write_text("#!/bin/sh\necho running\n")
        script.chmod(0o755)
        config = WakeOnJoystickConfig(qm_command=f'"{script}" --quiet')

        results = await run_startup_checks(config, fake_controller, fake_guest)

        check = _by_name(results)["qm_command"]
        assert check.passed
        assert check.detail == str(script)

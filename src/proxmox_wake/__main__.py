import argparse
import asyncio
import logging
import os
import signal
import sys
from pathlib import Path

from proxmox_wake.config import WakeOnJoystickConfig
from proxmox_wake.log_format import ColoredFormatter

ENV_FILE_PATH = Path.home() / ".config" / "proxmox-wake" / "env"


def _load_env_file(path: Path = ENV_FILE_PATH) -> None:
    if not path.exists():
        return
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key not in os.environ:
                os.environ[key] = value


def _configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler()
    if sys.stderr.isatty():
        handler.setFormatter(ColoredFormatter(datefmt="%H:%M:%S"))
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S")
        )
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, handlers=[handler])


def main() -> None:
    _load_env_file()
    parser = argparse.ArgumentParser(description="Start a Proxmox VM from a gamepad trigger press")
    parser.add_argument("--vm-id", help="VM to manage (overrides PROXMOX_VM_ID)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("status", help="Print whether the VM is running")
    subparsers.add_parser("wake", help="Start the VM once and exit")
    subparsers.add_parser("devices", help="List connected controllers")

    args = parser.parse_args()
    _configure_logging(args.verbose)

    config = WakeOnJoystickConfig()
    if args.vm_id:
        config.vm_id = args.vm_id

    if args.command == "status":
        sys.exit(asyncio.run(_run_status(config)))
    elif args.command == "wake":
        sys.exit(asyncio.run(_run_wake(config)))
    elif args.command == "devices":
        sys.exit(_run_devices(config))
    else:
        asyncio.run(_run_daemon(config))


async def _run_status(config: WakeOnJoystickConfig) -> int:
    from proxmox_wake.factory import create_guest_control

    guest = create_guest_control(config)
    running = await guest.is_running(config.vm_id)
    print("running" if running else "stopped")
    return 0


async def _run_wake(config: WakeOnJoystickConfig) -> int:
    from proxmox_wake.factory import create_guest_control

    guest = create_guest_control(config)
    return 0 if await guest.start(config.vm_id) else 1


def _run_devices(config: WakeOnJoystickConfig) -> int:
    from proxmox_wake.domain.errors import InputBackendError
    from proxmox_wake.factory import create_controller_input

    controller = create_controller_input(config)
    try:
        controller.open()
    except InputBackendError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        devices = controller.connected_devices()
    finally:
        controller.close()

    if not devices:
        print("No controllers connected")
    for device in devices:
        print(f"{device.device_id}: {device.name}")
    return 0


async def _run_daemon(config: WakeOnJoystickConfig) -> None:
    from proxmox_wake.domain.errors import InputBackendError
    from proxmox_wake.factory import create_controller_input, create_guest_control, create_supervisor
    from proxmox_wake.health import has_critical_failures, run_startup_checks

    logging.info("Starting Proxmox Wake-on-Joystick service...")

    guest = create_guest_control(config)
    controller = create_controller_input(config)

    results = await run_startup_checks(config, controller, guest)
    if has_critical_failures(results):
        logging.error("Critical health check failures, aborting startup")
        sys.exit(1)

    supervisor = create_supervisor(config, guest=guest, controller=controller)

    shutdown_event = asyncio.Event()
    shutdown_triggered = False

    def handle_signal() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            logging.warning("Forced exit")
            sys.exit(1)
        shutdown_triggered = True
        logging.info("Shutting down...")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal)

    supervisor_task = asyncio.create_task(supervisor.run())
    shutdown_task = asyncio.create_task(shutdown_event.wait())

    try:
        await asyncio.wait({supervisor_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED)
        if supervisor_task.done():
            try:
                supervisor_task.result()
            except InputBackendError as exc:
                logging.error("%s", exc)
                sys.exit(1)
    finally:
        shutdown_task.cancel()
        if not supervisor_task.done():
            supervisor_task.cancel()
            try:
                await asyncio.wait_for(supervisor_task, timeout=3.0)
            except (asyncio.CancelledError, asyncio.TimeoutError):
                pass


if __name__ == "__main__":
    main()

import asyncio
import logging
import shlex
from dataclasses import dataclass

logger = logging.getLogger(__name__)

RUNNING_MARKER = "running"


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class QmGuestControl:
    def __init__(self, command: str = "qm", timeout: float | None = None) -> None:
        self._command = shlex.split(command)
        self._timeout = timeout

    async def is_running(self, vm_id: str) -> bool:
        try:
            result = await self._run("status", vm_id)
        except (OSError, asyncio.TimeoutError) as exc:
            logger.warning("Status query for VM %s failed: %s", vm_id, exc)
            return False

        if not result.succeeded:
            logger.debug(
                "Status query for VM %s exited with code %d: %s",
                vm_id,
                result.returncode,
                result.stderr.strip(),
            )
            return False

        return RUNNING_MARKER in result.stdout

    async def start(self, vm_id: str) -> bool:
        try:
            result = await self._run("start", vm_id)
        except (OSError, asyncio.TimeoutError) as exc:
            logger.error("Failed to wake VM %s: %s", vm_id, exc)
            return False

        if result.succeeded:
            logger.info("Successfully started VM %s", vm_id)
            if result.stdout.strip():
                logger.info("Output: %s", result.stdout.strip())
            return True

        logger.error("Failed to start VM %s. Exit code: %d", vm_id, result.returncode)
        if result.stderr.strip():
            logger.error("Error: %s", result.stderr.strip())
        return False

    async def _run(self, verb: str, vm_id: str) -> CommandResult:
        process = await asyncio.create_subprocess_exec(
            *self._command,
            verb,
            vm_id,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except (asyncio.TimeoutError, asyncio.CancelledError):
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await asyncio.shield(process.wait())
            raise

        result = CommandResult(
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        logger.debug("%s %s %s -> %d", " ".join(self._command), verb, vm_id, result.returncode)
        return result

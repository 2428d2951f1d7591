from pydantic_settings import BaseSettings, SettingsConfigDict


class WakeOnJoystickConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PROXMOX_")

    vm_id: str = "100"
    qm_command: str = "qm"

    status_poll_seconds: float = 10.0
    listener_sleep_ms: int = 10
    status_check_iterations: int = 100

    # axis5 is the right trigger of Xbox-style pads under SDL on Linux
    trigger_button: str = "axis5"
    trigger_threshold: float = 0.5

    command_timeout_seconds: float | None = None

    @property
    def listener_sleep_seconds(self) -> float:
        return self.listener_sleep_ms / 1000

import os

from proxmox_wake.__main__ import _load_env_file


class TestLoadEnvFile:
    def test_missing_file_is_ignored(self, tmp_path):
        _load_env_file(tmp_path / "absent")

    def test_loads_values(self, tmp_path, monkeypatch):
        for key in ("PROXMOX_VM_ID", "PROXMOX_TRIGGER_BUTTON"):
            monkeypatch.setenv(key, "unset")
            monkeypatch.delenv(key)
        env_file = tmp_path / "env"
        env_file.write_text(
            "# managed VM\n"
            "PROXMOX_VM_ID=105\n"
            "\n"
            "PROXMOX_TRIGGER_BUTTON='button7'\n"
            "not a pair\n"
        )

        _load_env_file(env_file)

        assert os.environ["PROXMOX_VM_ID"] == "105"
        assert os.environ["PROXMOX_TRIGGER_BUTTON"] == "button7"

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PROXMOX_VM_ID", "200")
        env_file = tmp_path / "env"
        env_file.write_text("PROXMOX_VM_ID=105\n")

        _load_env_file(env_file)

        assert os.environ["PROXMOX_VM_ID"] == "200"

"""Configuration loader for rpi-maintenance."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from rpimaint.errors import MaintenanceError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "log_file",
        "lock_file",
        "email_to",
        "update_url",
        "backup_dir",
        "root_hints_path",
        "root_hints_url",
        "min_free_kb",
        "connectivity_host",
        "services",
        "verbose",
        "no_reboot",
        "program_path",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise MaintenanceError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise MaintenanceError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise MaintenanceError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise MaintenanceError(f"Unknown configuration keys: {unknown_list}")

        services = parsed.get("services")
        if services is not None and (
            not isinstance(services, list) or not all(isinstance(item, str) for item in services)
        ):
            raise MaintenanceError("Config key 'services' must be a list of service names.")

        min_free_kb = parsed.get("min_free_kb")
        if min_free_kb is not None and (
            isinstance(min_free_kb, bool) or not isinstance(min_free_kb, int) or min_free_kb < 0
        ):
            raise MaintenanceError("Config key 'min_free_kb' must be a non-negative integer.")

        return parsed

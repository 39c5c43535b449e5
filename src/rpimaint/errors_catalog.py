"""Actionable error catalog for rpi-maintenance."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "not_root": {
        "what": "Maintenance must run as root.",
        "next": "Re-run the command with `sudo`.",
    },
    "missing_dependency": {
        "what": "Required command `{command}` was not found.",
        "next": "Install it (for `mail`: mailutils or bsd-mailx) and try again.",
    },
    "already_running": {
        "what": "Maintenance is already running (PID: {pid}).",
        "next": "Wait for the running instance to finish, or remove {path} if it is stale.",
    },
    "no_connectivity": {
        "what": "No internet connection ({host} is unreachable).",
        "next": "Check the network link and DNS settings before retrying.",
    },
    "insufficient_disk": {
        "what": "Insufficient disk space. Available: {available_mb}MB, Required: {required_mb}MB.",
        "next": "Free space on the root filesystem or lower `min_free_kb` in the config.",
    },
}


def actionable_error(code: str, **kwargs) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"

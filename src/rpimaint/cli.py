import logging
import os
import sys

import click
from rich.logging import RichHandler

from . import __version__, constants
from .core import MaintenanceOrchestrator
from .errors import MaintenanceError
from .models import RunContext
from .services.config_loader import ConfigLoader

DEFAULT_CONFIG_PATH = "/etc/rpi-maintenance.yml"


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


console_handler = RichHandler(rich_tracebacks=True, show_level=False, show_path=False)
logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[console_handler],
)


def _print_version(ctx, _param, value):
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"RPi Maintenance Script v{__version__}")
    ctx.exit(0)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-u",
    "--update-only",
    is_flag=True,
    default=False,
    help="Check for script updates and exit.",
)
@click.option(
    "-v",
    "--version",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_print_version,
    help="Show script version and exit.",
)
@click.option("--no-reboot", is_flag=True, default=None, help="Skip the final system reboot.")
@click.option("--verbose", is_flag=True, default=None, help="Enable detailed output.")
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_PATH} if present.",
)
@click.option("--log-file", type=click.Path(), help="Path to the persistent log file.")
def main(update_only, no_reboot, verbose, config, log_file):
    """Automated maintenance for a headless Raspberry Pi.

    Updates OS packages, Pi-hole, Unbound root hints and RPi-Monitor, cleans
    up the system, performs health checks, emails a report and reboots.
    """
    logger = logging.getLogger("rpimaint")

    try:
        resolved_config = config
        if resolved_config is None and os.path.exists(DEFAULT_CONFIG_PATH):
            resolved_config = DEFAULT_CONFIG_PATH
        config_values = ConfigLoader().load(resolved_config)
    except MaintenanceError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    skip_reboot = bool(_resolve_option(no_reboot, config_values, "no_reboot", default=False))

    logger.setLevel(logging.DEBUG)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    program_path = _resolve_option(
        None,
        config_values,
        "program_path",
        default=os.path.realpath(sys.argv[0]),
    )

    context = RunContext(
        local_version=__version__,
        program_path=program_path,
        argv=tuple(sys.argv[1:]),
        log_file=_resolve_option(log_file, config_values, "log_file", default=constants.LOG_FILE),
        lock_file=config_values.get("lock_file", constants.LOCK_FILE),
        email_to=config_values.get("email_to", constants.EMAIL_TO),
        update_url=config_values.get("update_url", constants.UPDATE_URL),
        backup_dir=config_values.get("backup_dir", constants.BACKUP_DIR),
        root_hints_path=config_values.get("root_hints_path", constants.ROOT_HINTS_PATH),
        root_hints_url=config_values.get("root_hints_url", constants.ROOT_HINTS_URL),
        connectivity_host=config_values.get("connectivity_host", constants.CONNECTIVITY_HOST),
        min_free_kb=int(config_values.get("min_free_kb", constants.MIN_FREE_KB)),
        services=tuple(config_values.get("services", constants.HEALTH_SERVICES)),
        verbose=verbose,
        skip_reboot=skip_reboot,
        update_only=update_only,
    )

    raise SystemExit(MaintenanceOrchestrator(context).run())


def run(argv=None):
    """Console entry point; usage errors exit with status 1."""
    try:
        rv = main.main(args=argv, standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        raise SystemExit(1)
    except click.Abort:
        click.echo("Aborted!", err=True)
        raise SystemExit(1)
    raise SystemExit(rv or 0)


if __name__ == "__main__":
    run()

"""Default paths, thresholds and collaborator commands."""

LOG_FILE = "/var/log/rpi_maintenance.log"
LOCK_FILE = "/var/run/rpi_maintenance.lock"
EMAIL_TO = "root@localhost"
UPDATE_URL = "https://raw.githubusercontent.com/USERNAME/REPO/main/rpi-maintenance"
UPDATE_URL_PLACEHOLDER = "USERNAME/REPO"
BACKUP_DIR = "/home/pihole/backups"
ROOT_HINTS_PATH = "/var/lib/unbound/root.hints"
ROOT_HINTS_URL = "https://www.internic.net/domain/named.root"
CONNECTIVITY_HOST = "8.8.8.8"

SYSTEM_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"
REQUIRED_COMMANDS = ("mail",)

LOG_MAX_BYTES = 1048576
LOG_FILE_MODE = 0o644
MIN_FREE_KB = 512000

BACKUP_RETENTION = 5
BACKUP_PREFIX = "pihole-backup-"
BACKUP_SUFFIX = ".tar.gz"

HEALTH_SERVICES = ("pihole-FTL", "unbound", "rpimonitor")
DNS_PROBE_HOST = "google.com"
DNS_PROBE_SERVER = "127.0.0.1"

RPIMONITOR_PACKAGE = "rpimonitor"
RPIMONITOR_SCRIPT = "/usr/share/rpimonitor/scripts/update_packages_status.pl"

JOURNAL_RETENTION = "7d"

REBOOT_CANCEL_WINDOW_SECONDS = 10
UNATTENDED_REBOOT_DELAY_SECONDS = 5

DOWNLOAD_TIMEOUT_SECONDS = 60

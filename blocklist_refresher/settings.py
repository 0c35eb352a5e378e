"""
Initializes the Dynaconf settings object for the blocklist refresher.
This module is the single source of truth for all configuration.
"""

from pathlib import Path
from dynaconf import Dynaconf

PACKAGE_ROOT = Path(__file__).parent

SETTINGS_FILES = [
    str(PACKAGE_ROOT / "config" / "settings.toml"),
    "settings.local.toml",
]


def load_settings() -> Dynaconf:
    """Packaged defaults, then settings.local.toml, then env vars."""
    return Dynaconf(
        settings_files=SETTINGS_FILES,
        envvar_prefix="BLOCKLIST_REFRESHER",
        merge_enabled=True,
        load_dotenv=False,
        environments=False,
    )


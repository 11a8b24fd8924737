import logging
import os
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-secret-unsafe"


class ConfigurationError(Exception):
    """Raised when the server cannot start with the given configuration."""


def validate_startup(rules: Rules, data_dir: Path, migrations_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Raises:
        ConfigurationError: listing every problem found.
    """
    problems = []

    # 1. Data dir must be creatable
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        problems.append(f"Data directory {data_dir} is not usable: {e}")

    # 2. Migrations present
    if not migrations_dir.is_dir():
        problems.append(f"Migrations directory {migrations_dir} not found")

    # 3. Pointer parent must exist or be creatable
    pointer_dir = Path(rules.welcome.pointer_path).parent
    if pointer_dir.exists() and not os.access(pointer_dir, os.W_OK):
        problems.append(f"Welcome pointer directory {pointer_dir} is not writable")

    if problems:
        raise ConfigurationError("; ".join(problems))

    if os.environ.get("WAVE_SECRET_KEY", DEV_SECRET_KEY) == DEV_SECRET_KEY:
        logger.warning("WAVE_SECRET_KEY not set; session tokens use the development key")

    if rules.welcome.pointer_mode == "legacy":
        logger.info(
            "Welcome pointer in legacy mode; concurrent first requests may orphan a document"
        )

    logger.info("Configuration validated")

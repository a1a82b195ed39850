import os
import logging
from dataclasses import dataclass
from dotenv import load_dotenv

from .scheduler import DEFAULT_FETCH_LIMIT, DEFAULT_SUBTREE_LIMIT

logger = logging.getLogger(__name__)

DOCS_BASE_URL = "https://learn.microsoft.com/en-us/cli/azure/"
REFERENCE_URL = DOCS_BASE_URL + "reference-index?view=azure-cli-latest"
RELEASE_URL = "https://github.com/Azure/azure-cli/releases/latest"
TOOL_NAME = "az"

ENV_PREFIX = "AZ_DOC_SCRAPER_"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX + name} must be an integer, got {raw!r}") from None


@dataclass
class ScraperConfig:
    output_root: str = "src"
    reference_url: str = REFERENCE_URL
    release_url: str = RELEASE_URL
    docs_base_url: str = DOCS_BASE_URL
    fetch_limit: int = DEFAULT_FETCH_LIMIT
    subtree_limit: int = DEFAULT_SUBTREE_LIMIT
    timeout: int = 90
    max_retries: int = 0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ScraperConfig":
        """Build the configuration from the environment (and a .env file, if any)."""
        load_dotenv()
        config = cls(
            output_root=os.getenv(ENV_PREFIX + "OUTPUT_ROOT", cls.output_root),
            reference_url=os.getenv(ENV_PREFIX + "REFERENCE_URL", cls.reference_url),
            release_url=os.getenv(ENV_PREFIX + "RELEASE_URL", cls.release_url),
            docs_base_url=os.getenv(ENV_PREFIX + "DOCS_BASE_URL", cls.docs_base_url),
            fetch_limit=_env_int("FETCH_LIMIT", cls.fetch_limit),
            subtree_limit=_env_int("SUBTREE_LIMIT", cls.subtree_limit),
            timeout=_env_int("TIMEOUT", cls.timeout),
            max_retries=_env_int("MAX_RETRIES", cls.max_retries),
            log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", cls.log_level).upper(),
        )
        logger.debug(f"Loaded configuration: {config}")
        return config

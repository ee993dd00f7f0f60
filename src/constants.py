"""Constants used in the project."""

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)


class SchemaVersions(Enum):
    """Index record schema versions understood by the decoder.

    Args:
        Enum (int): Numeric value of the ``v`` tag.
    """

    V1 = 1
    V2 = 2
    V3 = 3


class DependencyKinds(Enum):
    """Dependency kind names as they appear in raw index records.

    Args:
        Enum (string): Raw ``kind`` value.
    """

    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "REGINDEX_LOG_LEVEL"

    # Integrity hash carried by every record (hex-encoded SHA-256)
    CHECKSUM_ALGORITHM = "sha256"
    CHECKSUM_LENGTH = 64
    CHECKSUM_PATTERN = r"^[0-9a-f]{64}$"

    HIGHEST_KNOWN_SCHEMA = SchemaVersions.V3.value
    DEFAULT_SCHEMA = SchemaVersions.V1.value
    MANDATORY_FIELDS = ("name", "vers", "deps", "cksum")
    MANDATORY_DEPENDENCY_FIELDS = ("name", "req")

    # Batch decoding
    BATCH_MAX_WORKERS = 4

    # Configuration discovery
    ENV_CONFIG = "REGINDEX_CONFIG"
    ENV_STRICT = "REGINDEX_STRICT"
    CONFIG_FILENAMES = ("regindex.yml", "regindex.yaml")
    CONFIG_USER_DIR = os.path.join("~", ".config", "regindex")


def _config_candidates():
    """Yield config file paths in precedence order."""
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path and env_path.strip():
        yield env_path.strip()
    for filename in Constants.CONFIG_FILENAMES:
        yield os.path.join(os.getcwd(), filename)
    for filename in Constants.CONFIG_FILENAMES:
        yield os.path.expanduser(os.path.join(Constants.CONFIG_USER_DIR, filename))


def _load_yaml_config(path=None):
    """Load the first available YAML configuration file.

    Args:
        path (str, optional): Explicit config path; skips discovery when given.

    Returns:
        dict: Parsed configuration, empty when nothing usable was found.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    candidates = [path] if path else list(_config_candidates())
    for candidate in candidates:
        if not os.path.isfile(candidate):
            if path:
                logger.warning("Config file not found: %s", candidate)
            continue
        try:
            with open(candidate, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to load config %s: %s", candidate, e)
            return {}
        if isinstance(data, dict):
            return data
        logger.warning("Ignoring config %s: top level is not a mapping", candidate)
        return {}
    return {}

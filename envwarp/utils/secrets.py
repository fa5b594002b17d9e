import os
from typing import List, MutableMapping, Optional
from envwarp.exceptions import SecretError
from envwarp.utils.logging import logger

SECRET_PREFIX = "file."
PASSTHROUGH_SUFFIX = "_FILE"

_logger = logger.bind(module='SecretResolver')


def _read_first_line(path: str) -> Optional[str]:
    """First line of ``path`` without its terminator, or None for an empty file."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            line = f.readline()
    except (OSError, UnicodeDecodeError) as e:
        raise SecretError(f"failed to read secret file {path}: {e}") from e
    if not line:
        return None
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def resolve_secrets(env: MutableMapping[str, str]) -> List[str]:
    """Replace ``file.<path>`` values with the first line of ``<path>``.

    Names ending in ``_FILE`` are left alone, as are values whose path does not
    exist. An empty secret file leaves the value untouched.

    Returns:
        The names of the variables that were replaced.
    """
    loaded = []
    for name, value in list(env.items()):
        if name.endswith(PASSTHROUGH_SUFFIX) or not value.startswith(SECRET_PREFIX):
            continue

        secret_path = value[len(SECRET_PREFIX):]
        if not os.path.exists(secret_path):
            _logger.debug(f"Secret path for {name} does not exist, keeping literal value")
            continue

        secret = _read_first_line(secret_path)
        if secret is None:
            continue

        env[name] = secret
        loaded.append(name)
        _logger.info(f"🔑 Loaded secret for {name} from {secret_path}")
    return loaded

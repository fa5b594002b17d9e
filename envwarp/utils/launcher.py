import os
import shutil
from typing import Mapping, NoReturn, Optional
from envwarp.exceptions import ConfigurationError, LaunchError
from envwarp.utils.logging import logger

_logger = logger.bind(module='ProcessLauncher')


def execute_command(command: str, env: Mapping[str, str], search_env: Optional[Mapping[str, str]] = None) -> NoReturn:
    """Replace the current process with ``command``.

    The command is split on whitespace, without shell quoting. The first token
    is looked up on the ``PATH`` of ``search_env`` (``env`` when not given);
    ``env`` becomes the new process's whole environment. Only returns by raising.
    """
    parts = command.split()
    if not parts:
        raise ConfigurationError("ENVWARP_EXECUTION is empty.")

    lookup_env = env if search_env is None else search_env
    cmd_path = shutil.which(parts[0], path=lookup_env.get("PATH", os.defpath))
    if cmd_path is None:
        raise LaunchError(f"Command not found in PATH: {parts[0]}")

    _logger.info(f"🚀 Executing command: {command}")
    try:
        os.execve(cmd_path, parts, dict(env))
    except OSError as e:
        raise LaunchError(f"Failed to execute command: {e}") from e
    # os.execve does not return on success
    raise LaunchError(f"Failed to execute command: {command}")

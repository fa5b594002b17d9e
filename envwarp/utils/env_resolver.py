import io
from pathlib import Path
from typing import Dict, List, MutableMapping, Sequence
from dotenv.parser import parse_stream
from envwarp.exceptions import EnvFileError, ExpansionError
from envwarp.utils.expander import expand
from envwarp.utils.models.data_models import FileResolution
from envwarp.utils.logging import logger

# Passes per file before giving up on stabilisation
MAX_PASSES = 5

_logger = logger.bind(module='EnvResolver')


def parse_env(content: str, source: str = "<string>") -> Dict[str, str]:
    """Parse ``.env`` syntax into a mapping, failing on lines the parser rejects."""
    values: Dict[str, str] = {}
    for binding in parse_stream(io.StringIO(content)):
        if binding.error:
            raise EnvFileError(
                f"Error unmarshaling env file {source}: invalid line {binding.original.line}: "
                f"{binding.original.string.rstrip()!r}"
            )
        if binding.key is None:
            continue
        values[binding.key] = binding.value if binding.value is not None else ""
    return values


def _load_pass(path: str, env: MutableMapping[str, str]) -> Dict[str, str]:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise EnvFileError(f"Error reading env file {path}: {e}") from e
    try:
        content = expand(raw, env)
    except ExpansionError as e:
        raise EnvFileError(f"Error substituting env file {path}: {e}") from e
    return parse_env(content, path)


def resolve_env_file(path: str, env: MutableMapping[str, str], max_passes: int = MAX_PASSES) -> FileResolution:
    """Apply one env file to ``env`` until a pass changes nothing, or ``max_passes`` is reached."""
    for attempt in range(1, max_passes + 1):
        changed = 0
        for key, value in _load_pass(path, env).items():
            if key not in env or env[key] != value:
                changed += 1
            env[key] = value

        _logger.debug(f"🔁 {path}: pass {attempt} changed {changed} variable(s)")
        if changed == 0:
            return FileResolution(path=path, passes=attempt, stable=True)

    _logger.warning(
        f"⚠️ {path} did not stabilise after {max_passes} passes; "
        f"check it for self-referencing or cyclic variables"
    )
    return FileResolution(path=path, passes=max_passes, stable=False)


def resolve_env_files(
    paths: Sequence[str], env: MutableMapping[str, str], max_passes: int = MAX_PASSES
) -> List[FileResolution]:
    """Resolve env files in the given order.

    Each file is stabilised before the next starts, and every value it sets is
    visible while expanding the files after it.
    """
    _logger.info(f"📥 Loading custom environment files: {', '.join(paths)}")
    return [resolve_env_file(path, env, max_passes) for path in paths]

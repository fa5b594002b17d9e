import os
import stat
from pathlib import Path
from typing import Iterator, List, Mapping, Union
from envwarp.exceptions import ExpansionError, TemplateError
from envwarp.utils.expander import expand
from envwarp.utils.logging import logger

TEMPLATE_SUFFIX = ".template"
OUTPUT_MODE = 0o644

_logger = logger.bind(module='TemplateRenderer')


def output_name(template_name: str) -> str:
    """File name a template renders to: the same name without the template suffix."""
    if template_name.endswith(TEMPLATE_SUFFIX):
        return template_name[:-len(TEMPLATE_SUFFIX)]
    return template_name


def _raise_walk_error(error: OSError):
    raise TemplateError(f"failed to walk template directory: {error}") from error


def discover_templates(source: Union[str, Path]) -> Iterator[Path]:
    """Yield the templates under ``source``.

    A regular file is its own template whatever its name. A directory is walked
    recursively for ``*.template`` files, in sorted order.
    """
    source = Path(source)
    try:
        is_dir = stat.S_ISDIR(source.stat().st_mode)
    except OSError as e:
        raise TemplateError(f"cannot stat ENVWARP_TEMPLATE path '{source}': {e}") from e

    if not is_dir:
        yield source
        return

    for root, dirs, files in os.walk(source, onerror=_raise_walk_error):
        dirs.sort()
        for name in sorted(files):
            if name.endswith(TEMPLATE_SUFFIX):
                yield Path(root) / name


def _open_output(path: str, flags: int) -> int:
    return os.open(path, flags, OUTPUT_MODE)


def render_file(template: Path, confdir: Path, env: Mapping[str, str]) -> Path:
    """Expand one template against ``env`` and write it into ``confdir``."""
    _logger.info(f"📄 Processing template: {template}")
    try:
        content = template.read_bytes().decode("utf-8", "surrogateescape")
    except OSError as e:
        raise TemplateError(f"failed to read {template}: {e}") from e

    try:
        rendered = expand(content, env)
    except ExpansionError as e:
        raise TemplateError(f"failed to substitute vars in {template}: {e}") from e

    out_path = confdir / output_name(template.name)
    try:
        with open(out_path, "wb", opener=_open_output) as f:
            f.write(rendered.encode("utf-8", "surrogateescape"))
    except OSError as e:
        raise TemplateError(f"failed to write to {out_path}: {e}") from e

    _logger.success(f"✅ Successfully written to: {out_path}")
    return out_path


def render_templates(source: Union[str, Path], confdir: Union[str, Path], env: Mapping[str, str]) -> List[Path]:
    """Render every template found at ``source`` into ``confdir``.

    ``confdir`` itself is created when missing, its parents are not. The first
    failure aborts the run; files already written are left in place.
    """
    confdir = Path(confdir)
    try:
        confdir.mkdir(exist_ok=True)
    except OSError as e:
        raise TemplateError(f"failed to create output directory '{confdir}': {e}") from e

    return [render_file(template, confdir, env) for template in discover_templates(source)]

import argparse
import os
import sys
from typing import List, MutableMapping, Optional
from envwarp import get_version
from envwarp.config.loader import load_settings, require_render_paths, CHECKURL_VAR
from envwarp.exceptions import ConfigurationError, EnvwarpError
from envwarp.utils.env_resolver import resolve_env_files
from envwarp.utils.health import check_health
from envwarp.utils.launcher import execute_command
from envwarp.utils.logging import logger, configure_logging
from envwarp.utils.models.data_models import Mode, PipelineMode, ProbeMode, VersionMode
from envwarp.utils.models.settings_model import Settings
from envwarp.utils.renderer import render_templates
from envwarp.utils.secrets import resolve_secrets


def parse_args(argv: List[str]) -> Mode:
    """Turn the argument vector into the mode to run."""
    if argv and argv[0] == "check":
        check_parser = argparse.ArgumentParser(
            prog="envwarp check",
            description="Probe an http://, unix:// or unix/ address and exit 0 when healthy.",
        )
        check_parser.add_argument("address", nargs="?", help=f"address to probe (default: ${CHECKURL_VAR})")
        args = check_parser.parse_args(argv[1:])
        return ProbeMode(address=args.address)

    parser = argparse.ArgumentParser(
        prog="envwarp",
        description="Resolve env files and secrets, render templates, then exec ENVWARP_EXECUTION.",
    )
    parser.add_argument(
        "-e", "--env",
        dest="env_files",
        action="append",
        default=[],
        metavar="FILE",
        help="path to a custom environment file (can be specified multiple times)",
    )
    parser.add_argument("-v", "--version", action="store_true", help="print version and exit")
    args = parser.parse_args(argv)
    if args.version:
        return VersionMode()
    return PipelineMode(env_files=args.env_files)


def run_pipeline(mode: PipelineMode, env: MutableMapping[str, str]) -> int:
    """Resolve, render and optionally exec, all against ``env``."""
    original_env = None
    if mode.env_files:
        # The exec'd service must not inherit templating-only variables
        original_env = dict(env)
        resolve_env_files(mode.env_files, env)

    resolve_secrets(env)

    settings = load_settings(env)
    configure_logging(settings.logs.level, settings.logs.directory)
    require_render_paths(settings)

    render_templates(settings.template, settings.confdir, env)
    logger.success("🎉 All templates processed successfully.")

    if settings.execution:
        # Look the command up on the resolved PATH, hand over the pre-pipeline environment
        execute_command(settings.execution, original_env if original_env is not None else env, search_env=env)
    return 0


def run_probe(mode: ProbeMode, settings: Settings) -> int:
    address = mode.address or settings.checkurl
    if not address:
        raise ConfigurationError(
            f"address must be provided as an argument or via {CHECKURL_VAR} environment variable."
        )
    return 0 if check_health(address) else 1


def main(argv: Optional[List[str]] = None, environ: Optional[MutableMapping[str, str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    env = dict(os.environ) if environ is None else environ

    try:
        mode = parse_args(argv)
        if isinstance(mode, VersionMode):
            print(get_version())
            return 0

        initial = load_settings(env)
        configure_logging(initial.logs.level, initial.logs.directory)

        if isinstance(mode, ProbeMode):
            return run_probe(mode, initial)
        return run_pipeline(mode, env)
    except EnvwarpError as e:
        logger.critical(f"🆘 Error: {e}")
        return 1


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()

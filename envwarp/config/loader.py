from typing import Mapping
from pydantic import ValidationError
from envwarp.exceptions import ConfigurationError
from envwarp.utils.models.settings_model import Settings
from envwarp.utils.logging import logger

ENV_PREFIX = "ENVWARP_"
TEMPLATE_VAR = "ENVWARP_TEMPLATE"
CONFDIR_VAR = "ENVWARP_CONFDIR"
EXECUTION_VAR = "ENVWARP_EXECUTION"
CHECKURL_VAR = "ENVWARP_CHECKURL"
LOG_LEVEL_VAR = "ENVWARP_LOG_LEVEL"
LOG_DIR_VAR = "ENVWARP_LOG_DIR"

_logger = logger.bind(module='ConfigLoader')


def load_settings(env: Mapping[str, str]) -> Settings:
    """Build settings from an environment mapping.

    Call this after env files and secrets have been resolved: the ENVWARP_*
    variables may themselves come from an env file.
    """
    raw = {
        "template": env.get(TEMPLATE_VAR),
        "confdir": env.get(CONFDIR_VAR),
        "execution": env.get(EXECUTION_VAR, ""),
        "checkurl": env.get(CHECKURL_VAR, ""),
        "logs": {"level": env.get(LOG_LEVEL_VAR) or "INFO", "directory": env.get(LOG_DIR_VAR) or None},
    }
    try:
        settings = Settings(**raw)
    except ValidationError as e:
        _logger.error(f"❌ Invalid {ENV_PREFIX}* configuration: {e}")
        raise ConfigurationError(f"Invalid {ENV_PREFIX}* configuration: {e}") from e
    _logger.debug(f"📖 Loaded settings: template={settings.template} confdir={settings.confdir}")
    return settings


def require_render_paths(settings: Settings) -> None:
    """Fail unless both the template source and the output directory are set."""
    if not settings.template or not settings.confdir:
        raise ConfigurationError(f"{TEMPLATE_VAR} and {CONFDIR_VAR} environment variables must be set.")

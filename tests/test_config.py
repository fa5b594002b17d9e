import pytest
from envwarp.config.loader import load_settings, require_render_paths
from envwarp.exceptions import ConfigurationError


def test_defaults():
    settings = load_settings({})
    assert settings.template is None
    assert settings.confdir is None
    assert settings.execution == ""
    assert settings.logs.level == "INFO"
    assert settings.logs.directory is None


def test_values_are_read_from_mapping():
    settings = load_settings({
        "ENVWARP_TEMPLATE": "/templates",
        "ENVWARP_CONFDIR": "/etc/app",
        "ENVWARP_EXECUTION": "nginx -g daemon",
        "ENVWARP_CHECKURL": "http://localhost/",
        "ENVWARP_LOG_LEVEL": "debug",
    })
    assert settings.template == "/templates"
    assert settings.confdir == "/etc/app"
    assert settings.execution == "nginx -g daemon"
    assert settings.checkurl == "http://localhost/"
    assert settings.logs.level == "DEBUG"


def test_unknown_log_level():
    with pytest.raises(ConfigurationError):
        load_settings({"ENVWARP_LOG_LEVEL": "LOUD"})


@pytest.mark.parametrize(
    "env",
    [{}, {"ENVWARP_TEMPLATE": "/t"}, {"ENVWARP_CONFDIR": "/c"}, {"ENVWARP_TEMPLATE": "", "ENVWARP_CONFDIR": "/c"}],
)
def test_render_paths_required(env):
    with pytest.raises(ConfigurationError, match="must be set"):
        require_render_paths(load_settings(env))

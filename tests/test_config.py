import pytest

from caskapi.config import (
    Config,
    ConfigError,
    LocalConfig,
    build_project_properties,
    load_config,
)


def test_project_properties_defaults():
    assert build_project_properties({}) == {
        "stripeKey": "stripe_secret",
        "railway_port": "3000",
        "on_railway": False,
        "flags_agent": "orchestrator",
        "flags_environment": "orchestrator",
        "flags_project": "flags-gg",
    }


def test_project_properties_overrides():
    env = {
        "STRIPE_SECRET": "secret",
        "PORT": "4321",
        "ON_RAILWAY": "true",
        "FLAGS_AGENT_ID": "agent-a",
        "FLAGS_ENVIRONMENT_ID": "env-b",
        "FLAGS_PROJECT_ID": "project-c",
    }
    props = build_project_properties(env)
    assert props["stripeKey"] == "secret"
    assert props["railway_port"] == "4321"
    assert props["on_railway"] is True
    assert props["flags_agent"] == "agent-a"
    assert props["flags_environment"] == "env-b"
    assert props["flags_project"] == "project-c"


@pytest.mark.parametrize("raw", ["1", "t", "T", "TRUE", "true", "True"])
def test_true_spellings(raw):
    assert build_project_properties({"ON_RAILWAY": raw})["on_railway"] is True


@pytest.mark.parametrize("raw", ["0", "f", "F", "FALSE", "false", "False"])
def test_false_spellings(raw):
    assert build_project_properties({"ON_RAILWAY": raw})["on_railway"] is False


@pytest.mark.parametrize("raw", ["yes", "on", "tRuE", "2"])
def test_invalid_boolean_raises(raw):
    with pytest.raises(ConfigError):
        build_project_properties({"ON_RAILWAY": raw})


def test_empty_value_uses_default():
    assert build_project_properties({"FLAGS_PROJECT_ID": ""})["flags_project"] == "flags-gg"


def test_load_config_defaults():
    config = load_config({})
    assert config.local == LocalConfig()
    assert config.local.development is False
    assert config.clerk_key == ""
    assert config.project_properties == build_project_properties({})


def test_load_config_reads_local_settings():
    config = load_config({"DEVELOPMENT": "true", "HTTP_PORT": "8081", "CLERK_KEY": "placeholder"})
    assert config.local.development is True
    assert config.local.http_port == 8081
    assert config.clerk_key == "placeholder"


@pytest.mark.parametrize("raw", ["eighty", "8 0", "80.5"])
def test_load_config_invalid_port(raw):
    with pytest.raises(ConfigError):
        load_config({"HTTP_PORT": raw})


def test_config_instances_do_not_share_properties():
    first = Config()
    second = Config()
    first.project_properties["flags_agent"] = "agent-a"
    assert second.project_properties == {}
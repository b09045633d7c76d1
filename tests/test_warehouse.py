from http import HTTPStatus

import pytest

from caskapi.config import Config, build_project_properties
from caskapi.warehouse import FlagsClient, WarehouseSystem


def _call(handler, environ=None):
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = int(status.split()[0])
        captured["headers"] = dict(headers)

    body = b"".join(handler(environ or {}, start_response))
    return captured["status"], captured["headers"], body


def _config(env=None):
    return Config(project_properties=build_project_properties(env or {}))


def test_flags_disabled_without_fetcher():
    client = FlagsClient("flags-gg", "orchestrator", "orchestrator")
    assert client.is_enabled("warehouses-get") is False


def test_flags_enabled_when_fetched_true():
    client = FlagsClient("p", "a", "e", fetch=lambda c: {"warehouses-get": True})
    assert client.is_enabled("warehouses-get") is True
    assert client.is_enabled("other-flag") is False


def test_flags_disabled_when_fetch_fails():
    def broken(client):
        raise ConnectionError("no route")

    client = FlagsClient("p", "a", "e", fetch=broken)
    assert client.is_enabled("warehouses-get") is False


def test_warehouses_not_implemented_when_flag_off():
    system = WarehouseSystem(_config())
    status, headers, body = _call(system.get_warehouses)
    assert status == HTTPStatus.NOT_IMPLEMENTED
    assert body == b""


def test_warehouses_ok_when_flag_on():
    system = WarehouseSystem(_config(), flags_fetch=lambda c: {"warehouses-get": True})
    status, _, body = _call(system.get_warehouses)
    assert status == HTTPStatus.OK
    assert body == b""


def test_warehouses_client_uses_project_properties():
    seen = []

    def fetch(client):
        seen.append((client.project_id, client.agent_id, client.environment_id))
        return {}

    env = {"FLAGS_PROJECT_ID": "proj", "FLAGS_AGENT_ID": "agt", "FLAGS_ENVIRONMENT_ID": "envi"}
    system = WarehouseSystem(_config(env), flags_fetch=fetch)
    status, _, body = _call(system.get_warehouses)
    assert status == HTTPStatus.NOT_IMPLEMENTED
    assert body == b""
    assert seen == [("proj", "agt", "envi")]


@pytest.mark.parametrize("missing", ["flags_project", "flags_agent", "flags_environment"])
def test_warehouses_missing_property_raises_key_error(missing):
    properties = build_project_properties({})
    del properties[missing]
    system = WarehouseSystem(Config(project_properties=properties))
    statuses = []

    def start_response(status, headers, exc_info=None):
        statuses.append(status)

    with pytest.raises(KeyError, match=missing) as excinfo:
        b"".join(system.get_warehouses({}, start_response))
    assert excinfo.value.args == (missing,)
    assert statuses == []
import json
from pathlib import Path

from itglue.cli.services.api import Endpoints
from tests.cli.base import request_mocker, run_cli, set_tmp_dir

ASSET = {
    "id": "99",
    "type": "flexible-assets",
    "attributes": {"name": "Firewall", "traits": {"name": "Firewall"}},
}


def test_get_asset(tmp_path: Path):
    set_tmp_dir(tmp_path)
    with request_mocker() as m:
        m.get(Endpoints.flexible_asset_by_id("99"), json={"data": ASSET})
        result = run_cli("get asset 99 --api-key k --json")
    assert json.loads(result.output.strip()) == ASSET


def test_create_asset(tmp_path: Path):
    set_tmp_dir(tmp_path)
    with request_mocker() as m:
        m.post(Endpoints.FLEXIBLE_ASSETS_LIST, json={"data": ASSET})
        result = run_cli(
            'create asset 42 -o 7 --traits \'{"name": "Firewall"}\' --api-key k'
        )
        body = m.last_request.json()
    assert result.exit_code == 0
    assert "Created flexible asset" in result.output
    assert body == {
        "data": {
            "type": "flexible-assets",
            "attributes": {
                "organization-id": "7",
                "flexible-asset-type-id": "42",
                "traits": {"name": "Firewall"},
            },
        }
    }


def test_create_asset_retries_timeouts(tmp_path: Path):
    set_tmp_dir(tmp_path)
    with request_mocker() as m:
        m.post(
            Endpoints.FLEXIBLE_ASSETS_LIST,
            [
                {"status_code": 504, "json": {"errors": [{"detail": "Timeout"}]}},
                {"json": {"data": ASSET}},
            ],
        )
        result = run_cli('create asset 42 -o 7 -t \'{"a": 1}\' --api-key k')
        assert m.call_count == 2
    assert result.exit_code == 0


def test_create_asset_invalid_traits(tmp_path: Path):
    set_tmp_dir(tmp_path)
    result = run_cli("create asset 42 -o 7 --traits not-json --api-key k")
    assert result.exit_code == 1
    assert "Traits must be a JSON object" in result.output


def test_update_asset(tmp_path: Path):
    set_tmp_dir(tmp_path)
    with request_mocker() as m:
        m.patch(Endpoints.flexible_asset_by_id("99"), json={"data": ASSET})
        result = run_cli('update asset 99 --traits \'{"name": "New"}\' --api-key k')
        body = m.last_request.json()
    assert "Updated flexible asset" in result.output
    assert body["data"]["id"] == "99"
    assert body["data"]["attributes"] == {"traits": {"name": "New"}}


def test_delete_asset(tmp_path: Path):
    set_tmp_dir(tmp_path)
    with request_mocker() as m:
        m.delete(Endpoints.flexible_asset_by_id("99"), status_code=204)
        result = run_cli("delete asset -f 99 --api-key k")
        assert m.call_count == 1
    assert "deleted" in result.output


def test_delete_asset_not_found(tmp_path: Path):
    set_tmp_dir(tmp_path)
    with request_mocker() as m:
        m.delete(
            Endpoints.flexible_asset_by_id("99"),
            status_code=404,
            json={"errors": [{"status": "404", "title": "Record not found"}]},
        )
        result = run_cli("delete asset -f 99 --api-key k", stacktrace=False)
    assert result.exit_code == 1
    assert "Record not found" in result.output

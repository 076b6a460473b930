from __future__ import annotations

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from bodyfilter.binding import bind_body
from bodyfilter.config import AppConfig
from bodyfilter.errors import UnknownMemberError, success_response
from bodyfilter.main import create_app
from bodyfilter.models import BindableModel


class Account(BindableModel):
    id: int
    name: str
    is_admin: bool


class Tag(BindableModel):
    label: str


class Sealed(BindableModel):
    code: str

    @classmethod
    def bare(cls):
        raise TypeError("no bare allocation")


JSON_HEADERS = {"Content-Type": "application/json"}


def _build_app(config: AppConfig | None = None):
    app = create_app(config or AppConfig())

    @app.post("/accounts")
    def create_account(
        account: Account = Depends(bind_body(Account, include={"name"})),
    ) -> dict:
        return success_response(account.model_dump(by_alias=True))

    @app.post("/tags")
    def create_tags(tags: list = Depends(bind_body(list[Tag]))) -> dict:
        return success_response([tag.label for tag in tags])

    @app.post("/sealed")
    def create_sealed(
        sealed: Sealed = Depends(bind_body(Sealed, exclude={"code"})),
    ) -> dict:
        return success_response(sealed.model_dump())

    return app


def test_bind_body_quarantines_out_of_contract_members():
    with TestClient(_build_app()) as client:
        response = client.post(
            "/accounts",
            content=b'{"id":7,"name":"Ada","isAdmin":true}',
            headers=JSON_HEADERS,
        )

    assert response.status_code == 200
    assert response.json() == {
        "ok": True,
        "data": {"id": 0, "name": "Ada", "isAdmin": False},
    }


def test_bind_body_accepts_vendor_media_type_with_parameters():
    with TestClient(_build_app()) as client:
        response = client.post(
            "/accounts",
            content=b'{"name":"Ada"}',
            headers={"Content-Type": "application/vnd.acme.v2+json; charset=utf-8"},
        )

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Ada"


def test_bind_body_rebuilds_collections_in_order():
    with TestClient(_build_app()) as client:
        response = client.post(
            "/tags",
            content=b'[{"label":"x"},{"label":"y"}]',
            headers=JSON_HEADERS,
        )

    assert response.status_code == 200
    assert response.json()["data"] == ["x", "y"]


def test_bind_body_rejects_non_json_content_type():
    with TestClient(_build_app()) as client:
        response = client.post(
            "/accounts",
            content=b'{"name":"Ada"}',
            headers={"Content-Type": "text/plain"},
        )

    assert response.status_code == 415
    payload = response.json()
    assert payload["ok"] is False
    assert payload["error"]["code"] == "UNSUPPORTED_MEDIA_TYPE"
    assert payload["error"]["details"] == {"contentType": "text/plain"}


def test_bind_body_allows_missing_content_type_when_not_required():
    app = _build_app(AppConfig(require_json_content_type=False))
    with TestClient(app) as client:
        response = client.post("/accounts", content=b'{"name":"Ada","isAdmin":true}')

    assert response.status_code == 200
    assert response.json()["data"]["isAdmin"] is False


def test_malformed_body_is_a_bad_request():
    with TestClient(_build_app()) as client:
        response = client.post(
            "/accounts", content=b'{"name":', headers=JSON_HEADERS
        )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "DECODE_ERROR"


def test_type_mismatch_is_a_bad_request():
    with TestClient(_build_app()) as client:
        response = client.post(
            "/accounts",
            content=b'{"id":"seven","name":"Ada","isAdmin":true}',
            headers=JSON_HEADERS,
        )

    assert response.status_code == 400
    assert response.json()["error"]["details"]["location"] == ["id"]


def test_broken_contract_is_a_server_fault():
    with TestClient(_build_app()) as client:
        response = client.post(
            "/sealed", content=b'{"code":"a"}', headers=JSON_HEADERS
        )

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "RECONSTRUCTION_ERROR"


def test_unknown_contract_member_fails_when_route_is_declared():
    with pytest.raises(UnknownMemberError):
        bind_body(Account, include={"name", "password"})

"""
Integration tests for generated CRUD endpoints using FastAPI TestClient.

These exercise the full router → service → store path of the address-book
application on an in-memory SQLite database.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Mapped, mapped_column

from crudkit.addressbook import Tag, TagSchema
from crudkit.api import add_crud_routes, create_crud_router
from crudkit.core.ids import IdKind
from crudkit.core.orm import CrudBase, IntPublicIdMixin, KeyMixin, SQLAlchemyRecordStore
from crudkit.core.service import CrudService, attribute_accessors

CONTACTS = "/api/contacts"
TAGS = "/api/tags"


def _create(client: TestClient, **fields) -> dict:
    resp = client.post(f"{CONTACTS}/create", json=fields)
    assert resp.status_code == 200, resp.text
    return resp.json()


class TestListEndpoints:
    def test_default_list(self, seeded_client):
        resp = seeded_client.get(CONTACTS)
        assert resp.status_code == 200
        body = resp.json()
        assert body["page"] == 0
        assert body["limit"] == 5
        assert body["total_count"] == 30
        assert body["total_pages"] == 6
        assert body["has_next"] is True
        assert body["has_previous"] is False
        assert len(body["items"]) == 5

    def test_items_hide_internal_key(self, seeded_client):
        item = seeded_client.get(CONTACTS).json()["items"][0]
        assert "id" not in item
        assert set(item) == {"public_id", "full_name", "email", "phone", "address"}

    def test_paged_query(self, seeded_client):
        body = seeded_client.get(f"{CONTACTS}?page=1&limit=7&sort=id").json()
        assert body["page"] == 1
        assert body["limit"] == 7
        assert body["skip"] == 7
        assert body["items"][0]["full_name"] == "Cont-7"

    def test_sorted_query(self, seeded_client):
        body = seeded_client.get(f"{CONTACTS}?limit=2&sort=full_name:desc").json()
        assert [i["full_name"] for i in body["items"]] == ["Cont-9", "Cont-8"]

    def test_offset_query(self, seeded_client):
        body = seeded_client.get(f"{CONTACTS}?limit=10&offset=20").json()
        assert body["page"] == 2
        assert body["has_next"] is False

    def test_negative_page_rejected(self, seeded_client):
        resp = seeded_client.get(f"{CONTACTS}?page=-1")
        assert resp.status_code == 400

    def test_bad_sort_rejected(self, seeded_client):
        resp = seeded_client.get(f"{CONTACTS}?sort=full_name;drop")
        assert resp.status_code == 400
        body = resp.json()
        assert body["errors"][0]["field"] == "sort"

    def test_unknown_sort_column_is_500(self, seeded_client):
        resp = seeded_client.get(f"{CONTACTS}?sort=nickname")
        assert resp.status_code == 500
        assert resp.json()["title"] == "Internal Server Error"

    def test_post_filter(self, seeded_client):
        resp = seeded_client.post(CONTACTS, json={"page": 2, "limit": 4, "sort": "id"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["page"] == 2
        assert body["items"][0]["full_name"] == "Cont-8"

    def test_post_without_body(self, seeded_client):
        body = seeded_client.post(CONTACTS).json()
        assert body["limit"] == 5
        assert body["total_count"] == 30

    def test_count(self, seeded_client):
        resp = seeded_client.get(f"{CONTACTS}/count")
        assert resp.status_code == 200
        assert resp.json() == 30

    def test_lookup(self, seeded_client):
        body = seeded_client.get(f"{CONTACTS}/lookup?keyword=Cont-2&limit=20").json()
        assert body["total_count"] == 11


class TestGetEndpoint:
    def test_get_existing(self, client):
        created = _create(client, full_name="Ada", email="ada@example.com")
        resp = client.get(f"{CONTACTS}/get/{created['public_id']}")
        assert resp.status_code == 200
        assert resp.json() == created

    def test_get_unknown_is_404(self, seeded_client):
        resp = seeded_client.get(f"{CONTACTS}/get/does-not-exist")
        assert resp.status_code == 404
        body = resp.json()
        assert body["status"] == 404
        assert body["title"] == "Not Found"
        assert "does-not-exist" in body["detail"]

    def test_resource_alias(self, client):
        created = _create(client, full_name="Ada")
        assert client.get(f"{CONTACTS}/{created['public_id']}").json()["full_name"] == "Ada"
        assert client.get(f"{CONTACTS}/missing").status_code == 404


class TestCreateEndpoints:
    def test_create(self, client):
        created = _create(client, full_name="Ada", phone="555")
        assert created["public_id"]
        assert created["full_name"] == "Ada"
        assert created["phone"] == "555"
        assert client.get(f"{CONTACTS}/count").json() == 1

    def test_create_ignores_supplied_id(self, client):
        created = _create(client, full_name="Ada", public_id="chosen")
        assert created["public_id"] != "chosen"

    def test_create_invalid_body(self, client):
        resp = client.post(f"{CONTACTS}/create", json={"email": "x@example.com"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["title"] == "Bad Request"
        assert any("full_name" in (e["field"] or "") for e in body["errors"])

    def test_create_malformed_json(self, client):
        resp = client.post(
            f"{CONTACTS}/create",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400

    def test_create_all(self, client):
        resp = client.post(
            f"{CONTACTS}/create-all",
            json=[{"full_name": "A"}, {"full_name": "B"}, {"full_name": "C"}],
        )
        assert resp.status_code == 200
        created = resp.json()
        assert [c["full_name"] for c in created] == ["A", "B", "C"]
        assert len({c["public_id"] for c in created}) == 3
        assert client.get(f"{CONTACTS}/count").json() == 3


class TestDeleteEndpoints:
    def test_delete_existing(self, client):
        created = _create(client, full_name="Ada")
        resp = client.get(f"{CONTACTS}/delete/{created['public_id']}")
        assert resp.status_code == 200
        assert resp.json() == 1
        assert client.get(f"{CONTACTS}/count").json() == 0

    def test_delete_unknown_is_zero(self, seeded_client):
        resp = seeded_client.get(f"{CONTACTS}/delete/does-not-exist")
        assert resp.status_code == 200
        assert resp.json() == 0

    def test_delete_all(self, client):
        a = _create(client, full_name="A")
        _create(client, full_name="B")
        resp = client.post(f"{CONTACTS}/delete-all", json=[a["public_id"], "nope"])
        assert resp.status_code == 200
        assert resp.json() == 1
        assert client.get(f"{CONTACTS}/count").json() == 1

    def test_delete_all_empty(self, client):
        assert client.post(f"{CONTACTS}/delete-all", json=[]).json() == 0

    def test_delete_alias_comma_separated(self, client):
        a = _create(client, full_name="A")
        b = _create(client, full_name="B")
        resp = client.delete(f"{CONTACTS}/{a['public_id']},{b['public_id']},nope")
        assert resp.status_code == 200
        assert resp.json() == 2


class TestUpdateEndpoints:
    def test_update(self, client):
        created = _create(client, full_name="Ada", email="ada@example.com")
        resp = client.post(
            f"{CONTACTS}/update",
            json={"public_id": created["public_id"], "full_name": "Ada L."},
        )
        assert resp.status_code == 200
        assert resp.json() == 1

        stored = client.get(f"{CONTACTS}/get/{created['public_id']}").json()
        assert stored["full_name"] == "Ada L."
        # full replace: omitted fields are cleared
        assert stored["email"] is None

    def test_update_unknown_is_zero(self, client):
        resp = client.post(f"{CONTACTS}/update", json={"public_id": "nope", "full_name": "x"})
        assert resp.status_code == 200
        assert resp.json() == 0

    def test_update_without_public_id(self, client):
        resp = client.post(f"{CONTACTS}/update", json={"full_name": "x"})
        assert resp.status_code == 400

    def test_update_all(self, client):
        a = _create(client, full_name="A")
        b = _create(client, full_name="B")
        resp = client.post(
            f"{CONTACTS}/update-all",
            json=[
                {"public_id": a["public_id"], "full_name": "A2"},
                {"public_id": b["public_id"], "full_name": "B2"},
                {"public_id": "nope", "full_name": "C2"},
            ],
        )
        assert resp.status_code == 200
        assert resp.json() == 2
        assert client.get(f"{CONTACTS}/get/{b['public_id']}").json()["full_name"] == "B2"

    def test_put_alias(self, client):
        a = _create(client, full_name="A")
        resp = client.put(CONTACTS, json=[{"public_id": a["public_id"], "full_name": "A3"}])
        assert resp.status_code == 200
        assert resp.json() == 1


class TestTagsEndpoints:
    def test_tags_mounted(self, client):
        resp = client.post(f"{TAGS}/create", json={"name": "family"})
        assert resp.status_code == 200
        public_id = resp.json()["public_id"]
        assert client.get(f"{TAGS}/get/{public_id}").json()["name"] == "family"
        assert client.get(f"{TAGS}/count").json() == 1
        assert client.get(f"{CONTACTS}/count").json() == 0


# ── Standalone router with integer public identifiers ──────────────────────


class Ticket(KeyMixin, IntPublicIdMixin, CrudBase):
    __tablename__ = "test_tickets"

    title: Mapped[str] = mapped_column()


class TicketSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    public_id: int | None = None
    title: str


@pytest.fixture()
def ticket_client(engine, session_factory):
    CrudBase.metadata.create_all(engine, tables=[Ticket.__table__])
    service = CrudService(
        SQLAlchemyRecordStore(session_factory, Ticket),
        *attribute_accessors(),
        id_kind=IdKind.INT64,
    )
    app = FastAPI()
    add_crud_routes(app, "/tickets", service, TicketSchema)
    with TestClient(app) as c:
        yield c


class TestIntegerIdentifiers:
    def test_round_trip(self, ticket_client):
        created = ticket_client.post("/tickets/create", json={"title": "broken"}).json()
        assert isinstance(created["public_id"], int)
        assert created["public_id"] > 0

        resp = ticket_client.get(f"/tickets/get/{created['public_id']}")
        assert resp.json()["title"] == "broken"

    def test_malformed_id_matches_nothing(self, ticket_client):
        ticket_client.post("/tickets/create", json={"title": "a"})
        assert ticket_client.get("/tickets/get/not-a-number").status_code == 404
        assert ticket_client.get("/tickets/delete/not-a-number").json() == 0

    def test_delete_all_parses_strings(self, ticket_client):
        created = ticket_client.post("/tickets/create", json={"title": "a"}).json()
        resp = ticket_client.post("/tickets/delete-all", json=[str(created["public_id"]), "x"])
        assert resp.json() == 1


class TestCreateCrudRouter:
    def test_router_routes(self, tags):
        router = create_crud_router(tags, TagSchema, prefix="/t/")
        paths = {(route.path, tuple(sorted(route.methods))) for route in router.routes}
        assert ("/t", ("GET",)) in paths
        assert ("/t", ("POST",)) in paths
        assert ("/t/get/{public_id}", ("GET",)) in paths
        assert ("/t/count", ("GET",)) in paths
        assert ("/t/create", ("POST",)) in paths
        assert ("/t/create-all", ("POST",)) in paths
        assert ("/t/delete/{public_id}", ("GET",)) in paths
        assert ("/t/delete-all", ("POST",)) in paths
        assert ("/t/update", ("POST",)) in paths
        assert ("/t/update-all", ("POST",)) in paths

    def test_custom_to_entity(self, engine, tags):
        seen = []

        def to_entity(payload):
            seen.append(payload)
            return Tag(name=payload.name.upper())

        class TagIn(BaseModel):
            model_config = ConfigDict(from_attributes=True)

            public_id: str | None = None
            name: str

        app = FastAPI()
        add_crud_routes(app, "/tags", tags, TagIn, to_entity=to_entity)
        with TestClient(app) as c:
            created = c.post("/tags/create", json={"name": "work"}).json()
        assert created["name"] == "WORK"
        assert len(seen) == 1

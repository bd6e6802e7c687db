"""Tests for the admin endpoints."""

import uuid

import pytest
from httpx import AsyncClient

from formflow.services import submission_service

from factories import make_form, make_notification, make_submission

HEADERS = {"X-Internal-Secret": "test-secret"}


@pytest.mark.asyncio
async def test_admin_requires_internal_secret(client: AsyncClient):
    response = await client.get(f"/admin/users/{uuid.uuid4()}/content")
    assert response.status_code == 422

    response = await client.get(
        f"/admin/users/{uuid.uuid4()}/content", headers={"X-Internal-Secret": "wrong"}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_preview_fills_every_form_field(client: AsyncClient, db):
    form = make_form(
        db,
        fields=[
            {"handle": "name", "type": "text"},
            {"handle": "email", "type": "email"},
        ],
    )

    response = await client.get(f"/admin/forms/{form.id}/preview", headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["form_id"] == str(form.id)
    assert set(body["field_values"]) == {"name", "email"}
    assert "@" in body["field_values"]["email"]
    assert submission_service.query_submissions(db, form_id=form.id).count() == 0


@pytest.mark.asyncio
async def test_preview_of_unknown_form_is_404(client: AsyncClient):
    response = await client.get(f"/admin/forms/{uuid.uuid4()}/preview", headers=HEADERS)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_apply_stencil_saves_form(client: AsyncClient, db):
    form = make_form(db)
    make_notification(db, form, name="Old")
    created = await client.post(
        "/stencils",
        json={
            "name": "Event",
            "handle": "event",
            "data": {
                "require_user": True,
                "data_retention": "days",
                "data_retention_value": 30,
                "pages": [{"label": "Page 1", "fields": [{"handle": "email", "type": "email"}]}],
                "notifications": [{"name": "Organisers", "recipient": "events@example.com"}],
            },
        },
        headers=HEADERS,
    )
    stencil_id = created.json()["id"]

    response = await client.post(f"/admin/forms/{form.id}/apply-stencil/{stencil_id}", headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["require_user"] is True
    assert body["data_retention"] == "days"
    assert [field["handle"] for field in body["fields"]] == ["email"]
    db.expire_all()
    assert [n.name for n in form.notifications] == ["Organisers"]


@pytest.mark.asyncio
async def test_apply_unknown_stencil_is_404(client: AsyncClient, db):
    form = make_form(db)
    response = await client.post(f"/admin/forms/{form.id}/apply-stencil/{uuid.uuid4()}", headers=HEADERS)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_user_content_delete_and_restore(client: AsyncClient, db):
    form = make_form(db)
    user_id = uuid.uuid4()
    for _ in range(2):
        make_submission(db, form, user_id=user_id)

    response = await client.get(f"/admin/users/{user_id}/content", headers=HEADERS)
    assert response.json() == {"user_id": str(user_id), "submissions": 2, "summary": ["2 form submissions"]}

    response = await client.post(f"/admin/users/{user_id}/delete-submissions", headers=HEADERS)
    assert response.json() == {"affected": 2}
    assert submission_service.count_user_submissions(db, user_id) == 0

    response = await client.post(f"/admin/users/{user_id}/restore-submissions", headers=HEADERS)
    assert response.json() == {"affected": 2}
    assert submission_service.count_user_submissions(db, user_id) == 2


@pytest.mark.asyncio
async def test_delete_submissions_transfers_to_inheritor(client: AsyncClient, db):
    form = make_form(db)
    user_id, inheritor_id = uuid.uuid4(), uuid.uuid4()
    make_submission(db, form, user_id=user_id)

    response = await client.post(
        f"/admin/users/{user_id}/delete-submissions",
        json={"inheritor_id": str(inheritor_id)},
        headers=HEADERS,
    )

    assert response.json() == {"affected": 1}
    db.expire_all()
    assert submission_service.count_user_submissions(db, inheritor_id) == 1


@pytest.mark.asyncio
async def test_inheritor_must_differ_from_user(client: AsyncClient):
    user_id = str(uuid.uuid4())
    response = await client.post(
        f"/admin/users/{user_id}/delete-submissions",
        json={"inheritor_id": user_id},
        headers=HEADERS,
    )
    assert response.status_code == 422

from __future__ import annotations

import asyncio
import time

import httpx

from pipeline_crm.auth.jwt import create_access_token
from pipeline_crm.main import create_app
from pipeline_crm.services.attachment_service import AttachmentManager
from pipeline_crm.services.prospect_service import ProspectService
from pipeline_crm.services.user_service import UserService

PDF_BYTES = b"%PDF-1.4\n%test\n%%EOF"


def _prospect(client, headers):
    return client.post("/api/prospects", json={"name": "Acme"}, headers=headers).json()["id"]


def test_upload_download_and_delete_pdf(client, user_headers):
    prospect_id = _prospect(client, user_headers)

    response = client.post(
        f"/api/prospects/{prospect_id}/upload-pdf",
        files={"pdf": ("quote.pdf", PDF_BYTES, "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    assert body["pdf_url"] == f"/api/prospects/{prospect_id}/download-pdf"

    download = client.get(body["pdf_url"], headers=user_headers)
    assert download.status_code == 200
    assert download.content == PDF_BYTES
    assert download.headers["content-type"] == "application/pdf"
    assert download.headers["content-disposition"].startswith("inline")

    assert client.delete(f"/api/prospects/{prospect_id}/pdf", headers=user_headers).json() == {"success": True}
    assert client.get(body["pdf_url"], headers=user_headers).status_code == 404


def test_non_pdf_upload_is_rejected(client, user_headers):
    prospect_id = _prospect(client, user_headers)
    response = client.post(
        f"/api/prospects/{prospect_id}/upload-pdf",
        files={"pdf": ("notes.txt", b"plain text", "text/plain")},
        headers=user_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Only PDF files are accepted."}
    assert client.get(f"/api/prospects/{prospect_id}", headers=user_headers).json()["pdf_key"] is None


def test_rejected_upload_keeps_existing_attachment(client, user_headers):
    prospect_id = _prospect(client, user_headers)
    client.post(
        f"/api/prospects/{prospect_id}/upload-pdf",
        files={"pdf": ("quote.pdf", PDF_BYTES, "application/pdf")},
        headers=user_headers,
    )
    original_key = client.get(f"/api/prospects/{prospect_id}", headers=user_headers).json()["pdf_key"]
    assert original_key

    response = client.post(
        f"/api/prospects/{prospect_id}/upload-pdf",
        files={"pdf": ("notes.txt", b"plain text", "text/plain")},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert client.get(f"/api/prospects/{prospect_id}", headers=user_headers).json()["pdf_key"] == original_key
    assert client.get(f"/api/prospects/{prospect_id}/download-pdf", headers=user_headers).content == PDF_BYTES


def test_upload_without_file_field_is_rejected(client, user_headers):
    prospect_id = _prospect(client, user_headers)
    response = client.post(f"/api/prospects/{prospect_id}/upload-pdf", headers=user_headers)
    assert response.status_code == 400


def test_download_without_attachment_is_not_found(client, user_headers):
    prospect_id = _prospect(client, user_headers)
    response = client.get(f"/api/prospects/{prospect_id}/download-pdf", headers=user_headers)
    assert response.status_code == 404
    assert "error" in response.json()


def test_other_users_cannot_reach_attachment(client, user_headers, register_user):
    prospect_id = _prospect(client, user_headers)
    client.post(
        f"/api/prospects/{prospect_id}/upload-pdf",
        files={"pdf": ("quote.pdf", PDF_BYTES, "application/pdf")},
        headers=user_headers,
    )
    other = {"Authorization": f"Bearer {register_user('bob@example.com', 'Bob')['token']}"}
    assert client.get(f"/api/prospects/{prospect_id}/download-pdf", headers=other).status_code == 404


def test_upload_runs_off_the_event_loop(settings, database, object_store, session, monkeypatch):
    owner = UserService(session).register("erin@example.com", "secret-pass", "Erin")
    prospect = ProspectService(session).create_prospect(owner.id, {"name": "Acme"})
    headers = {"Authorization": f"Bearer {create_access_token(owner.id, owner.name, settings.JWT_SECRET)}"}
    real_attach = AttachmentManager.attach

    def _slow_attach(self, *args, **kwargs):
        time.sleep(0.3)
        return real_attach(self, *args, **kwargs)

    monkeypatch.setattr(AttachmentManager, "attach", _slow_attach)
    app = create_app(config=settings, database=database, object_store=object_store)

    async def _upload_while_ticking():
        ticks = 0

        async def _ticker():
            nonlocal ticks
            while True:
                await asyncio.sleep(0.01)
                ticks += 1

        ticker = asyncio.create_task(_ticker())
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as http:
            response = await http.post(
                f"/api/prospects/{prospect.id}/upload-pdf",
                files={"pdf": ("quote.pdf", PDF_BYTES, "application/pdf")},
                headers=headers,
            )
        ticker.cancel()
        return response, ticks

    response, ticks = asyncio.run(_upload_while_ticking())
    assert response.status_code == 200, response.text
    assert ticks >= 10

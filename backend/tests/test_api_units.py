"""API tests for the user, units, documents and notes."""

from pathlib import Path

from studycompanion.services.documents import DOCX_MIME_TYPE, PDF_MIME_TYPE
from tests.factories import create_unit, make_docx, make_pdf, upload


# =============================================================================
# User
# =============================================================================


async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "healthy"}


async def test_get_user(client):
    response = await client.get("/api/user")
    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "mitch"
    assert body["name"] == "Mitchell"
    assert body["pace"] == 40
    assert "createdAt" in body


async def test_update_pace(client):
    response = await client.patch("/api/user/pace", json={"pace": 72})
    assert response.status_code == 200
    assert response.json()["pace"] == 72
    assert (await client.get("/api/user")).json()["pace"] == 72


async def test_pace_out_of_range_is_rejected(client):
    for pace in (0, 81, "fast"):
        response = await client.patch("/api/user/pace", json={"pace": pace})
        assert response.status_code == 400
        assert "pace" in response.json()["message"]
    assert (await client.get("/api/user")).json()["pace"] == 40


# =============================================================================
# Units
# =============================================================================


async def test_create_and_list_units(client):
    created = await create_unit(client)
    assert created["color"] == "#8FBC8F"

    response = await client.get("/api/units")
    assert response.status_code == 200
    [unit] = response.json()
    assert unit["id"] == created["id"]
    assert unit["documentsCount"] == 0
    assert unit["notesCount"] == 0
    assert unit["totalTopics"] == 5
    assert unit["progressPercentage"] == 0
    assert unit["lastStudied"] == "Not started"


async def test_unit_validation(client):
    response = await client.post("/api/units", json={"name": "", "color": "green"})
    assert response.status_code == 400
    assert "message" in response.json()


async def test_get_missing_unit(client):
    response = await client.get("/api/units/9999")
    assert response.status_code == 404
    assert response.json() == {"message": "Unit not found"}


async def test_unit_progress_reflects_completed_plan_entries(client):
    unit = await create_unit(client)
    await upload(client, unit["id"], make_pdf())
    entry = (
        await client.post(
            "/api/study-plan",
            json={
                "title": "Read chapter 1",
                "scheduledDate": "2025-03-10",
                "startTime": "09:00",
                "endTime": "10:00",
                "estimatedMinutes": 60,
                "unitId": unit["id"],
            },
        )
    ).json()
    await client.patch(f"/api/study-plan/{entry['id']}/complete")

    body = (await client.get(f"/api/units/{unit['id']}")).json()

    assert body["documentsCount"] == 1
    assert body["totalTopics"] == 5
    assert body["completedTopics"] == 1
    assert body["progressPercentage"] == 20
    assert body["lastStudied"].endswith("days ago")


async def test_delete_unit_cascades(client, settings):
    unit = await create_unit(client)
    document = (await upload(client, unit["id"], make_pdf())).json()
    await client.post(f"/api/units/{unit['id']}/notes", json={"content": "Valves"})
    assignment = (
        await client.post(
            "/api/assignments",
            json={"title": "Essay", "deadline": "2030-01-01T00:00:00Z", "unitId": unit["id"]},
        )
    ).json()

    response = await client.delete(f"/api/units/{unit['id']}")

    assert response.status_code == 204
    assert (await client.get(f"/api/units/{unit['id']}")).status_code == 404
    assert (await client.get(f"/api/documents/{document['id']}")).status_code == 404
    assert not any(Path(settings.upload_dir).iterdir())
    assert (await client.get(f"/api/assignments/{assignment['id']}")).json()["unitId"] is None


# =============================================================================
# Documents
# =============================================================================


async def test_upload_pdf_extracts_text(client, settings):
    unit = await create_unit(client)

    response = await upload(client, unit["id"], make_pdf("Mitral valve"))

    assert response.status_code == 201
    body = response.json()
    assert body["originalName"] == "heart.pdf"
    assert body["mimeType"] == PDF_MIME_TYPE
    assert body["filename"].endswith(".pdf")
    assert body["filename"] != "heart.pdf"
    assert "Mitral valve" in body["extractedText"]
    assert body["extractionWarning"] is None
    assert (Path(settings.upload_dir) / body["filename"]).exists()

    listed = (await client.get(f"/api/units/{unit['id']}/documents")).json()
    assert [d["id"] for d in listed] == [body["id"]]
    assert "extractedText" not in listed[0]


async def test_upload_docx_extracts_paragraphs(client):
    unit = await create_unit(client)

    response = await upload(
        client, unit["id"], make_docx("Innate immunity", "Adaptive immunity"), "immune.docx", DOCX_MIME_TYPE
    )

    assert response.status_code == 201
    assert response.json()["extractedText"] == "Innate immunity\n\nAdaptive immunity"


async def test_upload_rejects_other_types(client):
    unit = await create_unit(client)
    response = await upload(client, unit["id"], b"plain text", "notes.txt", "text/plain")
    assert response.status_code == 400
    assert response.json() == {"message": "Only PDF and DOCX files are supported"}


async def test_upload_rejects_oversized_files(client):
    unit = await create_unit(client)
    response = await upload(client, unit["id"], b"%PDF" + b"0" * (10 * 1024 * 1024))
    assert response.status_code == 400
    assert "too large" in response.json()["message"]


async def test_upload_keeps_document_when_extraction_fails(client):
    unit = await create_unit(client)

    response = await upload(client, unit["id"], b"not really a pdf")

    assert response.status_code == 201
    body = response.json()
    assert body["extractedText"] == ""
    assert body["extractionWarning"]


async def test_upload_to_missing_unit(client):
    response = await upload(client, 9999, make_pdf())
    assert response.status_code == 404


async def test_delete_document_unlinks_notes(client, settings):
    unit = await create_unit(client)
    document = (await upload(client, unit["id"], make_pdf())).json()
    note = (
        await client.post(
            f"/api/units/{unit['id']}/notes",
            json={"content": "See page 2", "documentId": document["id"]},
        )
    ).json()
    assert note["documentId"] == document["id"]

    response = await client.delete(f"/api/documents/{document['id']}")

    assert response.status_code == 204
    [remaining] = (await client.get(f"/api/units/{unit['id']}/notes")).json()
    assert remaining["documentId"] is None
    assert not (Path(settings.upload_dir) / document["filename"]).exists()


# =============================================================================
# Notes
# =============================================================================


async def test_note_lifecycle(client):
    unit = await create_unit(client)
    note = (await client.post(f"/api/units/{unit['id']}/notes", json={"content": "First draft"})).json()

    updated = await client.patch(f"/api/notes/{note['id']}", json={"content": "Second draft"})
    assert updated.status_code == 200
    assert updated.json()["content"] == "Second draft"
    assert updated.json()["updatedAt"] >= note["updatedAt"]

    assert (await client.delete(f"/api/notes/{note['id']}")).status_code == 204
    assert (await client.get(f"/api/units/{unit['id']}/notes")).json() == []
    assert (await client.delete(f"/api/notes/{note['id']}")).status_code == 404


async def test_note_requires_content(client):
    unit = await create_unit(client)
    response = await client.post(f"/api/units/{unit['id']}/notes", json={"content": "   "})
    assert response.status_code == 400


async def test_note_document_must_belong_to_unit(client):
    first = await create_unit(client, "Anatomy")
    second = await create_unit(client, "Physiology")
    document = (await upload(client, first["id"], make_pdf())).json()

    response = await client.post(
        f"/api/units/{second['id']}/notes",
        json={"content": "Wrong unit", "documentId": document["id"]},
    )

    assert response.status_code == 400

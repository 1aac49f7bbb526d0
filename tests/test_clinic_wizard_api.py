"""End-to-end tests for the clinic wizard and clinic endpoints."""
import httpx
import pytest

from vetconnect.dependencies.services import get_geocoder, get_mirror_outbox
from vetconnect.services.document_store import InMemoryDocumentStore, get_document_store
from vetconnect.services.geocoding_service import GeocodingService
from vetconnect.services.mirror_outbox import MirrorOutbox


class FailingDocumentStore(InMemoryDocumentStore):
    def add(self, collection, fields):
        raise ConnectionError("remote store unreachable")

    def put(self, collection, doc_id, fields, merge=False, delete_fields=()):
        raise ConnectionError("remote store unreachable")


async def fill_wizard(client, headers):
    resp = await client.patch(
        "/clinic-wizard/draft",
        json={
            "clinicName": "Happy Paws Veterinary Clinic",
            "contactNumber": "+63 912 345 6789",
            "openHours": "Mon-Sat 8:00 AM - 6:00 PM",
        },
        headers=headers,
    )
    assert resp.status_code == 200

    resp = await client.post(
        "/clinic-wizard/map/location",
        json={"position": [120.58, 15.14], "address": "123 Rizal St, Angeles City"},
        headers=headers,
    )
    assert resp.status_code == 200

    for service in ("Vaccination", "Dental Care"):
        resp = await client.post("/clinic-wizard/services/toggle", json={"service": service}, headers=headers)
        assert resp.status_code == 200
    resp = await client.post("/clinic-wizard/services/confirm", headers=headers)
    assert resp.status_code == 200

    resp = await client.post("/clinic-wizard/jump", json={"step": 4}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["step"] == 4


async def create_clinic(client, headers):
    resp = await client.post("/clinic-wizard/open", json={}, headers=headers)
    assert resp.status_code == 200
    await fill_wizard(client, headers)
    resp = await client.post("/clinic-wizard/submit", headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["clinic"]


@pytest.mark.asyncio
async def test_wizard_requires_clinic_owner(async_client, pet_owner_headers):
    resp = await async_client.post("/clinic-wizard/open", json={})
    assert resp.status_code in (401, 403)

    resp = await async_client.post("/clinic-wizard/open", json={}, headers=pet_owner_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(async_client):
    resp = await async_client.get("/clinics", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_state_before_open_is_not_found(async_client, auth_headers):
    resp = await async_client.get("/clinic-wizard", headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_next_on_blank_draft_reports_errors(async_client, auth_headers):
    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)

    resp = await async_client.post("/clinic-wizard/next", headers=auth_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["step"] == 1
    assert body["errors"] == {"clinicName": "Clinic name is required"}


@pytest.mark.asyncio
async def test_create_flow(async_client, auth_headers, owner_id):
    resp = await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)
    assert resp.json()["mode"] == "create"
    assert resp.json()["stepTitle"] == "Basic Information"

    await fill_wizard(async_client, auth_headers)

    state = (await async_client.get("/clinic-wizard", headers=auth_headers)).json()
    assert state["canSubmit"] is True
    assert state["draft"]["coordinates"] == {"latitude": 15.14, "longitude": 120.58}
    assert state["draft"]["services"] == "Vaccination, Dental Care"

    resp = await async_client.post("/clinic-wizard/submit", headers=auth_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Clinic created successfully!"

    clinic = body["clinic"]
    assert clinic["ownerId"] == owner_id
    assert clinic["ownerName"] == "Dr. Maria Santos"
    assert clinic["clinicName"] == "Happy Paws Veterinary Clinic"
    assert clinic["services"] == "Vaccination, Dental Care"
    assert clinic["location"] == {"lat": 15.14, "lng": 120.58}
    assert clinic["coords"] == [15.14, 120.58]
    assert clinic["verified"] is False

    # wizard is gone once saved
    resp = await async_client.get("/clinic-wizard", headers=auth_headers)
    assert resp.status_code == 404

    listing = (await async_client.get("/clinics", headers=auth_headers)).json()
    assert listing["total"] == 1
    assert listing["activeClinicId"] == clinic["id"]

    mirrored = get_document_store().get("clinics", clinic["id"])
    assert mirrored["clinicName"] == "Happy Paws Veterinary Clinic"


@pytest.mark.asyncio
async def test_edit_flow_updates_existing_clinic(async_client, auth_headers):
    clinic = await create_clinic(async_client, auth_headers)

    resp = await async_client.post("/clinic-wizard/open", json={"clinicId": clinic["id"]}, headers=auth_headers)
    assert resp.status_code == 200
    state = resp.json()
    assert state["mode"] == "edit"
    assert state["existingId"] == clinic["id"]
    assert state["selectedServices"] == ["Vaccination", "Dental Care"]

    await async_client.patch("/clinic-wizard/draft", json={"openHours": "Daily 24 hours"}, headers=auth_headers)
    await async_client.post("/clinic-wizard/jump", json={"step": 4}, headers=auth_headers)
    resp = await async_client.post("/clinic-wizard/submit", headers=auth_headers)

    assert resp.status_code == 201
    assert resp.json()["message"] == "Clinic updated successfully!"
    assert resp.json()["clinic"]["id"] == clinic["id"]

    listing = (await async_client.get("/clinics", headers=auth_headers)).json()
    assert listing["total"] == 1
    assert listing["items"][0]["openHours"] == "Daily 24 hours"
    assert get_document_store().get("clinics", clinic["id"])["openHours"] == "Daily 24 hours"


@pytest.mark.asyncio
async def test_open_unknown_clinic_is_not_found(async_client, auth_headers):
    resp = await async_client.post("/clinic-wizard/open", json={"clinicId": "clinic_missing"}, headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_open_other_owners_clinic_is_forbidden(async_client, auth_headers):
    get_document_store().put("clinics", "clinic_theirs", {"id": "clinic_theirs", "ownerId": "someone-else"})

    resp = await async_client.post("/clinic-wizard/open", json={"clinicId": "clinic_theirs"}, headers=auth_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_edit_of_clinic_with_blank_coordinates(async_client, auth_headers, owner_id):
    get_document_store().put("clinics", "legacy1", {
        "id": "legacy1",
        "ownerId": owner_id,
        "clinicName": "Old Paws",
        "address": "45 Henson St, Angeles City",
        "contactNumber": "555-1234567",
        "openHours": "Mon-Fri 8-6",
        "services": "Vaccination",
        "latitude": "",
        "longitude": "",
    })

    resp = await async_client.post("/clinic-wizard/open", json={"clinicId": "legacy1"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["draft"]["coordinates"] is None

    await async_client.post("/clinic-wizard/jump", json={"step": 4}, headers=auth_headers)
    resp = await async_client.post("/clinic-wizard/submit", headers=auth_headers)

    assert resp.status_code == 201, resp.text
    assert resp.json()["clinic"]["latitude"] is None

    listing = await async_client.get("/clinics", headers=auth_headers)
    assert listing.status_code == 200
    assert [c["id"] for c in listing.json()["items"]] == ["legacy1"]
    assert "latitude" not in get_document_store().get("clinics", "legacy1")


@pytest.mark.asyncio
async def test_remote_failure_still_saves_locally(app, async_client, auth_headers):
    outbox = MirrorOutbox(FailingDocumentStore())
    app.dependency_overrides[get_mirror_outbox] = lambda: outbox

    clinic = await create_clinic(async_client, auth_headers)

    listing = (await async_client.get("/clinics", headers=auth_headers)).json()
    assert [c["id"] for c in listing["items"]] == [clinic["id"]]
    assert len(outbox.failed) == 1
    assert outbox.failed[0].doc_id == clinic["id"]


@pytest.mark.asyncio
async def test_submit_before_last_step_conflicts(async_client, auth_headers):
    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)
    resp = await async_client.post("/clinic-wizard/submit", headers=auth_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_submit_with_broken_earlier_step(async_client, auth_headers):
    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)
    await fill_wizard(async_client, auth_headers)
    await async_client.patch("/clinic-wizard/draft", json={"clinicName": "  "}, headers=auth_headers)

    resp = await async_client.post("/clinic-wizard/submit", headers=auth_headers)

    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["step"] == 1
    assert detail["errors"] == {"clinicName": "Clinic name is required"}

    state = (await async_client.get("/clinic-wizard", headers=auth_headers)).json()
    assert state["isOpen"] is True


@pytest.mark.asyncio
async def test_location_without_address_is_reverse_geocoded(app, async_client, auth_headers):
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"display_name": "Angeles City, Pampanga"}))
    geocoder = GeocodingService(client=httpx.AsyncClient(transport=transport), base_url="https://nominatim.test")
    app.dependency_overrides[get_geocoder] = lambda: geocoder

    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)
    resp = await async_client.post(
        "/clinic-wizard/map/location",
        json={"position": {"lat": 15.14, "lng": 120.58}},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["draft"]["address"] == "Angeles City, Pampanga"
    assert resp.json()["mapOpen"] is False


@pytest.mark.asyncio
async def test_location_with_bad_position_is_rejected(async_client, auth_headers):
    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)
    resp = await async_client.post(
        "/clinic-wizard/map/location",
        json={"position": "somewhere", "address": "Somewhere"},
        headers=auth_headers,
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_map_search_not_found(app, async_client, auth_headers):
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json=[]))
    geocoder = GeocodingService(client=httpx.AsyncClient(transport=transport), base_url="https://nominatim.test")
    app.dependency_overrides[get_geocoder] = lambda: geocoder

    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)
    resp = await async_client.get("/clinic-wizard/map/search", params={"q": "Atlantis"}, headers=auth_headers)

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Location not found. Please try a different search term."


@pytest.mark.asyncio
async def test_services_dialog_endpoints(async_client, auth_headers):
    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)
    await async_client.post("/clinic-wizard/services/open", headers=auth_headers)

    resp = await async_client.post("/clinic-wizard/services/search", json={"query": "care"}, headers=auth_headers)
    assert resp.json()["filteredServices"] == ["Dental Care", "Emergency Care"]

    resp = await async_client.post("/clinic-wizard/services/select-all", headers=auth_headers)
    assert resp.json()["selectedServices"] == ["Dental Care", "Emergency Care"]

    resp = await async_client.post("/clinic-wizard/services/cancel", headers=auth_headers)
    body = resp.json()
    assert body["servicesDialogOpen"] is False
    assert body["selectedServices"] == ["Dental Care", "Emergency Care"]
    assert body["draft"]["services"] == ""

    resp = await async_client.post("/clinic-wizard/services/toggle", json={"service": "Astrology"}, headers=auth_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_veterinarian_endpoints(async_client, auth_headers):
    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)

    resp = await async_client.post("/clinic-wizard/veterinarians", json={"name": "Dr. Cruz"}, headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["detail"]["errors"] == {
        "veterinarian": "Please fill in veterinarian name and specialization"
    }

    resp = await async_client.post(
        "/clinic-wizard/veterinarians",
        json={"name": "Dr. Cruz", "specialization": "Surgery"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    vet_id = resp.json()["id"]

    resp = await async_client.delete(f"/clinic-wizard/veterinarians/{vet_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["draft"]["veterinarians"] == []

    resp = await async_client.delete(f"/clinic-wizard/veterinarians/{vet_id}", headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_cancel_discards_wizard(async_client, auth_headers):
    await async_client.post("/clinic-wizard/open", json={}, headers=auth_headers)
    resp = await async_client.delete("/clinic-wizard", headers=auth_headers)
    assert resp.status_code == 204

    resp = await async_client.get("/clinic-wizard", headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_active_clinic_endpoints(async_client, auth_headers):
    resp = await async_client.get("/clinics/active", headers=auth_headers)
    assert resp.status_code == 404

    first = await create_clinic(async_client, auth_headers)
    second = await create_clinic(async_client, auth_headers)

    active = (await async_client.get("/clinics/active", headers=auth_headers)).json()
    assert active["id"] == first["id"]

    resp = await async_client.put("/clinics/active", json={"clinicId": second["id"]}, headers=auth_headers)
    assert resp.status_code == 200
    assert (await async_client.get("/clinics/active", headers=auth_headers)).json()["id"] == second["id"]

    resp = await async_client.delete(f"/clinics/{second['id']}", headers=auth_headers)
    assert resp.status_code == 204
    assert (await async_client.get("/clinics/active", headers=auth_headers)).status_code == 404
    assert (await async_client.get(f"/clinics/{first['id']}", headers=auth_headers)).status_code == 200


@pytest.mark.asyncio
async def test_settings_defaults_and_update(async_client, pet_owner_headers):
    resp = await async_client.get("/settings", headers=pet_owner_headers)
    assert resp.status_code == 200
    assert resp.json()["profile-visibility"] == "clinics-only"

    resp = await async_client.put(
        "/settings",
        json={"profile-visibility": "private", "email-notifications": False},
        headers=pet_owner_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["profile-visibility"] == "private"
    assert body["email-notifications"] is False
    assert body["language"] == "en"


@pytest.mark.asyncio
async def test_health(async_client):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"

    resp = await async_client.get("/health/ready")
    assert resp.json()["database"] == "ok"

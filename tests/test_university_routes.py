"""University / program administration and the public catalogue."""

from __future__ import annotations

from extensions import db
from models.program import Program
from models.university import University


def test_admin_creates_university_and_program(client, admin_headers):
    missing = client.post("/api/admin/universities", headers=admin_headers,
                          json={"name": "University of Galway", "country": "Ireland"})
    assert missing.status_code == 400
    assert missing.get_json()["fields"] == ["city"]

    resp = client.post("/api/admin/universities", headers=admin_headers, json={
        "name": "University of Galway", "country": "Ireland", "city": "Galway", "logo_url": "  ",
    })
    assert resp.status_code == 201
    uni = resp.get_json()["university"]
    assert uni["status"] == "active"
    assert uni["logo_url"] is None

    prog = client.post(f"/api/admin/universities/{uni['id']}/programs", headers=admin_headers,
                       json={"name": "MSc Marine Science", "degree_type": "Master", "duration": "1 year"})
    assert prog.status_code == 201
    assert client.post(f"/api/admin/universities/{uni['id']}/programs", headers=admin_headers,
                       json={"name": "No degree"}).status_code == 400

    listed = client.get(f"/api/admin/universities/{uni['id']}/programs", headers=admin_headers).get_json()
    assert [p["name"] for p in listed["items"]] == ["MSc Marine Science"]


def test_admin_updates_and_deletes(client, admin_headers, university, program):
    resp = client.put(f"/api/admin/universities/{university.id}", headers=admin_headers,
                      json={"status": "inactive", "id": 999})
    assert resp.status_code == 200
    assert resp.get_json()["university"]["status"] == "inactive"
    assert resp.get_json()["university"]["id"] == university.id

    assert client.put(f"/api/admin/universities/{university.id}", headers=admin_headers,
                      json={"city": ""}).status_code == 400
    assert client.put(f"/api/admin/programs/{program.id}", headers=admin_headers,
                      json={"tuition_fee": "GBP 28,000"}).get_json()["program"]["tuition_fee"] == "GBP 28,000"

    uni_id = university.id
    assert client.delete(f"/api/admin/universities/{uni_id}", headers=admin_headers).status_code == 200
    assert db.session.get(University, uni_id) is None
    assert Program.query.filter_by(university_id=uni_id).count() == 0

    assert client.delete("/api/admin/programs/12345", headers=admin_headers).status_code == 404


def test_admin_routes_are_forbidden_to_students(client, student_headers):
    assert client.get("/api/admin/universities", headers=student_headers).status_code == 403
    assert client.get("/api/admin/students", headers=student_headers).status_code == 403


def test_admin_lists_students(client, admin_headers, student, other_student):
    items = client.get("/api/admin/students", headers=admin_headers).get_json()["items"]
    assert sorted(i["email"] for i in items) == ["amina@example.com", "ben@example.com"]
    found = client.get("/api/admin/students?q=ode", headers=admin_headers).get_json()["items"]
    assert [i["email"] for i in found] == ["ben@example.com"]


def test_public_catalogue_hides_inactive(client, university, inactive_university):
    body = client.get("/api/universities").get_json()
    assert [u["name"] for u in body["items"]] == ["University of Leeds"]
    assert body["items"][0]["program_count"] == 1

    assert client.get("/api/universities?country=Ireland").get_json()["items"] == []
    assert client.get("/api/universities?q=leeds").get_json()["total"] == 1

    detail = client.get(f"/api/universities/{university.id}").get_json()
    assert detail["programs"][0]["name"] == "MSc Data Science"
    assert client.get(f"/api/universities/{inactive_university.id}").status_code == 404


def test_meta_options(client):
    body = client.get("/api/meta/options").get_json()
    slots = {s["name"]: s for s in body["document_slots"]}
    assert slots["cv"]["required"] is True
    assert slots["appScreenshots"]["max_files"] == 50
    assert "Master" in body["degree_types"]
    assert body["application_statuses"][0] == "pending"

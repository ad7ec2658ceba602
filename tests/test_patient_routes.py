from bson import ObjectId

from conftest import auth_header
from mongo import APPOINTMENTS, PATIENTS
from services.patient_service import PatientService


def test_create_and_list(client, two_doctors, add_patient):
    token, doctor_id = two_doctors["d1"]
    patient = add_patient(token, name=" John Doe ", age=35, disease="Hypertension")
    assert patient["name"] == "John Doe"
    assert patient["doctor"] == doctor_id
    assert patient["createdAt"].endswith("Z")

    response = client.get("/api/patients", headers=auth_header(token))
    assert response.status_code == 200
    assert [p["_id"] for p in response.json()["patients"]] == [patient["_id"]]


def test_list_is_scoped_and_newest_first(client, two_doctors, add_patient):
    token1, _ = two_doctors["d1"]
    token2, _ = two_doctors["d2"]
    first = add_patient(token1, name="First")
    second = add_patient(token1, name="Second")
    add_patient(token2, name="Someone else's")

    patients = client.get("/api/patients", headers=auth_header(token1)).json()["patients"]
    assert [p["_id"] for p in patients] == [second["_id"], first["_id"]]

    other = client.get("/api/patients", headers=auth_header(token2)).json()["patients"]
    assert [p["name"] for p in other] == ["Someone else's"]


def test_owner_comes_from_token_not_body(client, db, two_doctors):
    token1, id1 = two_doctors["d1"]
    _, id2 = two_doctors["d2"]
    response = client.post(
        "/api/patients",
        json={"name": "Jane", "age": 40, "disease": "Asthma", "doctor": id2},
        headers=auth_header(token1),
    )
    assert response.status_code == 201
    stored = db[PATIENTS].find_one({"_id": ObjectId(response.json()["patient"]["_id"])})
    assert stored["doctor"] == ObjectId(id1)


def test_create_requires_fields(client, two_doctors):
    token, _ = two_doctors["d1"]
    for payload in [{}, {"name": "Jane", "age": 40}, {"name": "Jane", "disease": "Flu"}, {"age": 3, "disease": "Flu"}]:
        response = client.post("/api/patients", json=payload, headers=auth_header(token))
        assert response.status_code == 400
        assert response.json() == {"message": "Please provide name, age, and disease"}


def test_age_zero_is_valid(client, two_doctors, add_patient):
    token, _ = two_doctors["d1"]
    assert add_patient(token, name="Newborn", age=0, disease="Jaundice")["age"] == 0


def test_age_out_of_range(client, two_doctors):
    token, _ = two_doctors["d1"]
    for age in [-1, 151]:
        response = client.post(
            "/api/patients", json={"name": "Jane", "age": age, "disease": "Flu"}, headers=auth_header(token)
        )
        assert response.status_code == 400


def test_malformed_age(client, two_doctors):
    token, _ = two_doctors["d1"]
    response = client.post(
        "/api/patients", json={"name": "Jane", "age": "old", "disease": "Flu"}, headers=auth_header(token)
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request body"}


def test_partial_update_keeps_other_fields(client, two_doctors, add_patient):
    token, _ = two_doctors["d1"]
    patient = add_patient(token, name="John Doe", age=35, disease="Hypertension")

    response = client.put(f"/api/patients/{patient['_id']}", json={"age": 36}, headers=auth_header(token))
    assert response.status_code == 200
    updated = response.json()["patient"]
    assert updated["age"] == 36
    assert updated["name"] == "John Doe"
    assert updated["disease"] == "Hypertension"
    assert updated["createdAt"] == patient["createdAt"]


def test_empty_update_changes_nothing(client, two_doctors, add_patient):
    token, _ = two_doctors["d1"]
    patient = add_patient(token)
    response = client.put(f"/api/patients/{patient['_id']}", json={}, headers=auth_header(token))
    assert response.status_code == 200
    updated = response.json()["patient"]
    assert (updated["name"], updated["age"], updated["disease"]) == (patient["name"], patient["age"], patient["disease"])


def test_update_rejects_blank_name(client, two_doctors, add_patient):
    token, _ = two_doctors["d1"]
    patient = add_patient(token)
    response = client.put(f"/api/patients/{patient['_id']}", json={"name": "  "}, headers=auth_header(token))
    assert response.status_code == 400


def test_other_doctor_gets_same_404_as_missing_id(client, two_doctors, add_patient):
    token1, _ = two_doctors["d1"]
    token2, _ = two_doctors["d2"]
    patient = add_patient(token1)

    foreign = client.put(f"/api/patients/{patient['_id']}", json={"name": "Hacked"}, headers=auth_header(token2))
    missing = client.put(f"/api/patients/{ObjectId()}", json={"name": "Hacked"}, headers=auth_header(token2))
    malformed = client.put("/api/patients/not-an-id", json={"name": "Hacked"}, headers=auth_header(token2))
    assert foreign.status_code == missing.status_code == malformed.status_code == 404
    assert foreign.json() == missing.json() == malformed.json()

    foreign_delete = client.delete(f"/api/patients/{patient['_id']}", headers=auth_header(token2))
    missing_delete = client.delete(f"/api/patients/{ObjectId()}", headers=auth_header(token2))
    assert foreign_delete.status_code == missing_delete.status_code == 404
    assert foreign_delete.json() == missing_delete.json()

    # Still intact for the owner
    patients = client.get("/api/patients", headers=auth_header(token1)).json()["patients"]
    assert patients[0]["name"] == patient["name"]


def test_delete(client, two_doctors, add_patient):
    token, _ = two_doctors["d1"]
    patient = add_patient(token)
    response = client.delete(f"/api/patients/{patient['_id']}", headers=auth_header(token))
    assert response.status_code == 200
    assert response.json() == {"message": "Patient deleted successfully"}
    assert client.get("/api/patients", headers=auth_header(token)).json()["patients"] == []

    again = client.delete(f"/api/patients/{patient['_id']}", headers=auth_header(token))
    assert again.status_code == 404


def test_delete_removes_the_patients_appointments(client, db, two_doctors, add_patient):
    token, _ = two_doctors["d1"]
    patient = add_patient(token)
    kept = add_patient(token, name="Other")
    for p in (patient, kept):
        response = client.post(
            "/api/appointments",
            json={"patientId": p["_id"], "date": "2026-02-27T10:00:00Z"},
            headers=auth_header(token),
        )
        assert response.status_code == 201

    client.delete(f"/api/patients/{patient['_id']}", headers=auth_header(token))

    remaining = list(db[APPOINTMENTS].find())
    assert [a["patient"] for a in remaining] == [ObjectId(kept["_id"])]


def test_boolean_age_is_rejected(client, db, two_doctors, add_patient):
    token, _ = two_doctors["d1"]
    response = client.post(
        "/api/patients", json={"name": "Jane", "age": True, "disease": "Flu"}, headers=auth_header(token)
    )
    assert response.status_code == 400
    assert db[PATIENTS].count_documents({"name": "Jane"}) == 0

    patient = add_patient(token)
    response = client.put(f"/api/patients/{patient['_id']}", json={"age": False}, headers=auth_header(token))
    assert response.status_code == 400
    assert db[PATIENTS].find_one({"_id": ObjectId(patient["_id"])})["age"] == patient["age"]


def test_get_owned_is_scoped_to_the_doctor(db, two_doctors, add_patient):
    token1, id1 = two_doctors["d1"]
    _, id2 = two_doctors["d2"]
    patient = add_patient(token1)
    service = PatientService(db)

    assert service.get_owned(ObjectId(id1), patient["_id"])["name"] == patient["name"]
    assert service.get_owned(ObjectId(id2), patient["_id"]) is None
    assert service.get_owned(ObjectId(id1), "not-an-id") is None

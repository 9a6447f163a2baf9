"""
Tests fonctionnels de l'API départements / employés
"""
import pytest
from fastapi.testclient import TestClient

from app.bootstrap import close_container
from app.main import app

SAMPLE_DEPARTMENT = {
    "code": "PAR",
    "name": "Paris Office",
    "country_code": "FRA",
    "city": "Paris",
    "comments": "Nouveau bureau",
    "date_created": "2024-03-01T09:00:00",
}

SAMPLE_EMPLOYEE = {
    "first_name": "Camille",
    "last_name": "Martin",
    "age": 31,
    "department_code": "SEA",
    "comments": "Data engineer",
}


@pytest.fixture()
def client(monkeypatch, database_url):
    """Client avec une base SQLite temporaire initialisée au démarrage (SEED_ON_STARTUP)."""
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("SEED_ON_STARTUP", "true")
    close_container()
    with TestClient(app) as test_client:
        yield test_client
    close_container()


def test_health_ok(client):
    """Test du endpoint de santé"""
    res = client.get("/health")
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == "ok"
    assert data["db_connected"] is True
    assert "version" in data


def test_health_degraded_without_database(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("SEED_ON_STARTUP", raising=False)
    close_container()
    with TestClient(app) as no_db_client:
        res = no_db_client.get("/health")
        assert res.status_code == 200
        assert res.json()["status"] == "degraded"
        assert no_db_client.get("/db-test").status_code == 500
        assert no_db_client.get("/departments").status_code == 500
    close_container()


def test_root_ok(client):
    """Test du endpoint racine"""
    res = client.get("/")
    assert res.status_code == 200
    data = res.json()
    assert "message" in data
    assert "version" in data
    assert "departments" in data["endpoints"]


def test_db_test(client):
    res = client.get("/db-test")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_list_departments(client):
    res = client.get("/departments")
    assert res.status_code == 200
    data = res.json()
    assert data["count"] == 4
    assert [d["code"] for d in data["departments"]] == ["AMS", "BER", "CHI", "SEA"]


def test_get_department(client):
    res = client.get("/departments/SEA")
    assert res.status_code == 200
    assert res.json()["city"] == "Seattle"


def test_get_unknown_department(client):
    assert client.get("/departments/XXX").status_code == 404


def test_create_department(client):
    res = client.post("/departments", json=SAMPLE_DEPARTMENT)
    assert res.status_code == 201
    assert res.json() == {"inserted": 1}
    assert client.get("/departments/PAR").json()["name"] == "Paris Office"


def test_create_duplicate_department_conflict(client):
    duplicate = dict(SAMPLE_DEPARTMENT, code="SEA")
    res = client.post("/departments", json=duplicate)
    assert res.status_code == 409


def test_create_department_validation_error(client):
    invalid = dict(SAMPLE_DEPARTMENT, code="TOOLONG")
    assert client.post("/departments", json=invalid).status_code == 422


def test_update_department(client):
    payload = dict(SAMPLE_DEPARTMENT, code="ZZZ", name="Seattle HQ", city="Seattle")
    res = client.put("/departments/SEA", json=payload)
    assert res.status_code == 200
    assert res.json()["code"] == "SEA"
    assert client.get("/departments/SEA").json()["name"] == "Seattle HQ"


def test_update_unknown_department(client):
    assert client.put("/departments/XXX", json=SAMPLE_DEPARTMENT).status_code == 404


def test_delete_department(client):
    client.post("/departments", json=SAMPLE_DEPARTMENT)
    assert client.delete("/departments/PAR").status_code == 204
    assert client.get("/departments/PAR").status_code == 404


def test_delete_referenced_department_conflict(client):
    # SEA a des employés : la clé étrangère bloque la suppression
    assert client.delete("/departments/SEA").status_code == 409


def test_department_employees(client):
    res = client.get("/departments/SEA/employees")
    assert res.status_code == 200
    data = res.json()
    assert data["count"] == 2
    assert {e["first_name"] for e in data["employees"]} == {"Toly", "Jemmy"}
    assert client.get("/departments/XXX/employees").status_code == 404


def test_list_and_get_employees(client):
    res = client.get("/employees")
    assert res.status_code == 200
    assert res.json()["count"] == 5

    first = client.get("/employees/1")
    assert first.status_code == 200
    assert first.json()["last_name"] == "Pochkin"
    assert client.get("/employees/999").status_code == 404


def test_create_employee(client):
    res = client.post("/employees", json=SAMPLE_EMPLOYEE)
    assert res.status_code == 201
    assert client.get("/employees").json()["count"] == 6


def test_create_employee_unknown_department(client):
    res = client.post("/employees", json=dict(SAMPLE_EMPLOYEE, department_code="XXX"))
    assert res.status_code == 409


def test_create_employee_validation_error(client):
    """Âge négatif invalide"""
    res = client.post("/employees", json=dict(SAMPLE_EMPLOYEE, age=-5))
    assert res.status_code == 422


def test_employee_report(client):
    res = client.get("/reports/employees")
    assert res.status_code == 200
    rows = res.json()
    assert len(rows) == 5
    assert rows[0]["department_code"] == "AMS"


def test_department_summary(client):
    res = client.get("/reports/departments")
    assert res.status_code == 200
    summary = {row["department_code"]: row for row in res.json()}
    assert summary["SEA"]["headcount"] == 2
    assert summary["CHI"]["average_age"] == 35.0

"""
Tests du service de rapports (données de démo).
"""

from datetime import datetime

from app.schemas import Department


def test_employee_report_joins_departments(seeded_container):
    rows = seeded_container.report_service.employee_report()

    assert len(rows) == 5
    # Tri : code département puis nom de famille
    assert [(r.department_code, r.last_name) for r in rows] == [
        ("AMS", "Matthews"),
        ("BER", "Ashworth"),
        ("CHI", "Fosse"),
        ("SEA", "Hyland"),
        ("SEA", "Pochkin"),
    ]
    berlin = rows[1]
    assert berlin.department_name == "Berlin's Office"
    assert berlin.city == "Berlin"
    assert berlin.country_code == "DEU"
    assert isinstance(berlin.employee_id, int)


def test_department_summary(seeded_container):
    summary = {s.department_code: s for s in seeded_container.report_service.department_summary()}

    assert list(summary) == ["AMS", "BER", "CHI", "SEA"]
    seattle = summary["SEA"]
    assert seattle.headcount == 2
    assert seattle.average_age == 33.5
    assert seattle.min_age == 27
    assert seattle.max_age == 40


def test_department_without_employees_has_zero_headcount(seeded_container):
    seeded_container.department_dao.insert(
        Department(code="PAR", name="Paris Office", country_code="FRA", city="Paris",
                   date_created=datetime(2021, 5, 1))
    )

    summary = {s.department_code: s for s in seeded_container.report_service.department_summary()}
    report = seeded_container.report_service.employee_report()

    assert summary["PAR"].headcount == 0
    assert summary["PAR"].average_age is None
    assert summary["PAR"].min_age is None
    assert all(r.department_code != "PAR" for r in report)


def test_empty_database(container):
    container.department_dao.create_table_if_not_exists()
    container.employee_dao.create_table_if_not_exists()

    assert container.report_service.department_summary() == []
    assert container.report_service.employee_report() == []

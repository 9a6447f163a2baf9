# app/seed.py
"""
Script d'initialisation de la base de démonstration.

ATTENTION : supprime puis recrée les tables `employees` et `departments`.
Rien n'est fait automatiquement au démarrage, sauf si SEED_ON_STARTUP=true.

Utilisation :
    DATABASE_URL=sqlite:////tmp/company.db python -m app.seed
"""

import logging
from datetime import datetime, timedelta
from typing import List

from app.bootstrap import AppContainer, build_container
from app.logging_config import configure_logging
from app.schemas import Department, EmployeeIn
from app.settings import Settings
from app.transactions import transaction

logger = logging.getLogger(__name__)


def _ago(milliseconds: int) -> datetime:
    return (datetime.now() - timedelta(milliseconds=milliseconds)).replace(microsecond=0)


def initial_departments() -> List[Department]:
    return [
        Department(code="SEA", name="Seattle's Office", country_code="USA", city="Seattle",
                   comments="Headquarter and R&D", date_created=_ago(99999999999)),
        Department(code="CHI", name="Chicago's Office", country_code="USA", city="Chicago",
                   comments="Financial department", date_created=_ago(77777777777)),
        Department(code="BER", name="Berlin's Office", country_code="DEU", city="Berlin",
                   comments="R&D", date_created=_ago(55555555555)),
        Department(code="AMS", name="Amsterdam's Office", country_code="NLD", city="Amsterdam",
                   comments="Just for fun :)", date_created=_ago(33333333333)),
    ]


def initial_employees() -> List[EmployeeIn]:
    return [
        EmployeeIn(first_name="Toly", last_name="Pochkin", age=40, department_code="SEA",
                   comments="CEO", date_created=_ago(89999999999)),
        EmployeeIn(first_name="Jemmy", last_name="Hyland", age=27, department_code="SEA",
                   comments="CPO", date_created=_ago(79999999999)),
        EmployeeIn(first_name="Doreen", last_name="Fosse", age=35, department_code="CHI",
                   comments="CFO", date_created=_ago(69999999999)),
        EmployeeIn(first_name="Brandy", last_name="Ashworth", age=39, department_code="BER",
                   comments="Lead engineer", date_created=_ago(45555555555)),
        EmployeeIn(first_name="Lenny", last_name="Matthews", age=50, department_code="AMS",
                   comments="DJ", date_created=_ago(25555555555)),
    ]


def seed_database(container: AppContainer) -> dict:
    """Recrée les tables et insère les données de démo, dans une seule transaction.

    Retour :
        dict : nombre de départements et d'employés insérés
    """
    departments = initial_departments()
    employees = initial_employees()

    with transaction(container.data_source) as tx:
        # employees référence departments : on supprime dans l'ordre inverse
        container.employee_dao.drop_table_if_exists(scope=tx)
        container.department_dao.drop_table_if_exists(scope=tx)
        container.department_dao.create_table_if_not_exists(scope=tx)
        container.employee_dao.create_table_if_not_exists(scope=tx)

        # TODO: insertion par lots (executemany) une fois PreparedStatement capable de batcher
        for department in departments:
            container.department_dao.insert(department, scope=tx)
        for employee in employees:
            container.employee_dao.insert(employee, scope=tx)

    logger.info("Base initialisée : %d départements, %d employés", len(departments), len(employees))
    return {"departments": len(departments), "employees": len(employees)}


def main() -> None:
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    container = build_container(settings)
    try:
        counts = seed_database(container)
    finally:
        container.close()
    print(f"✅ Base initialisée : {counts['departments']} départements, {counts['employees']} employés")


if __name__ == "__main__":
    main()

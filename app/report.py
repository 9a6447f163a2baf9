# app/report.py
"""
Service de rapports sur les employés.

- employee_report      : employés joints à leur département
- department_summary   : effectif et âges par département (agrégation pandas)
"""

import logging
from typing import List, Optional

import pandas as pd

from app.models import Departments, Employees
from app.schemas import DepartmentSummary, EmployeeReportRow
from app.templates import sql_template
from app.transactions import TransactionScope, required_transaction

logger = logging.getLogger(__name__)

_E = Employees.table_name
_D = Departments.table_name

# LEFT JOIN depuis les départements : un département sans employé a une ligne (employé NULL)
_DEPARTMENT_STAFF_SQL = (
    f"SELECT {_D}.{Departments.code.name} AS department_code, "
    f"{_D}.{Departments.name.name} AS department_name, "
    f"{_D}.{Departments.city.name} AS city, "
    f"{_D}.{Departments.country_code.name} AS country_code, "
    f"{_E}.{Employees.id.name} AS employee_id, "
    f"{_E}.{Employees.first_name.name} AS first_name, "
    f"{_E}.{Employees.last_name.name} AS last_name, "
    f"{_E}.{Employees.age.name} AS age "
    f"FROM {_D} LEFT JOIN {_E} "
    f"ON {_E}.{Employees.department_code.name} = {_D}.{Departments.code.name}"
)


class EmployeeReportService:
    """Rapports en lecture seule, construits sur les mêmes templates SQL que les DAO."""

    department_staff_template = sql_template(
        Departments,
        lambda t: (
            f"{_DEPARTMENT_STAFF_SQL} "
            f"ORDER BY {_D}.{Departments.code.name}, {_E}.{Employees.last_name.name}"
        ),
    )

    def __init__(self, data_source):
        self.data_source = data_source

    def _staff_frame(self, scope: Optional[TransactionScope]) -> pd.DataFrame:
        with required_transaction(self.data_source, scope) as tx:
            with self.department_staff_template.prepare_statement(tx.connection) as stmt:
                rows = stmt.execute_query()
        frame = pd.DataFrame(
            rows,
            columns=[
                "department_code", "department_name", "city", "country_code",
                "employee_id", "first_name", "last_name", "age",
            ],
        )
        # Colonnes entièrement NULL -> dtype object : on force le numérique (NaN)
        for col in ("employee_id", "age"):
            frame[col] = pd.to_numeric(frame[col], errors="coerce")
        return frame

    def employee_report(self, scope: Optional[TransactionScope] = None) -> List[EmployeeReportRow]:
        frame = self._staff_frame(scope)
        staffed = frame.dropna(subset=["employee_id"])
        return [
            EmployeeReportRow(
                employee_id=int(row.employee_id),
                first_name=row.first_name,
                last_name=row.last_name,
                age=int(row.age),
                department_code=row.department_code,
                department_name=row.department_name,
                city=row.city,
                country_code=row.country_code,
            )
            for row in staffed.itertuples(index=False)
        ]

    def department_summary(self, scope: Optional[TransactionScope] = None) -> List[DepartmentSummary]:
        frame = self._staff_frame(scope)
        if frame.empty:
            return []

        # count() ignore les NaN : un département sans employé a un effectif de 0
        summary = (
            frame.groupby(["department_code", "department_name"], sort=True)
            .agg(
                headcount=("employee_id", "count"),
                average_age=("age", "mean"),
                min_age=("age", "min"),
                max_age=("age", "max"),
            )
            .reset_index()
        )
        logger.debug("Synthèse calculée pour %d départements", len(summary))

        result = []
        for row in summary.itertuples(index=False):
            result.append(
                DepartmentSummary(
                    department_code=row.department_code,
                    department_name=row.department_name,
                    headcount=int(row.headcount),
                    average_age=None if pd.isna(row.average_age) else round(float(row.average_age), 2),
                    min_age=None if pd.isna(row.min_age) else int(row.min_age),
                    max_age=None if pd.isna(row.max_age) else int(row.max_age),
                )
            )
        return result

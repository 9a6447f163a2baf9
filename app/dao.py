# app/dao.py
"""
DAO (Data Access Objects) des départements et des employés.

Chaque méthode accepte une portée transactionnelle optionnelle `scope` :
- sans `scope`, l'appel ouvre (et commite) sa propre transaction ;
- avec `scope`, l'appel rejoint la transaction de l'appelant.
Cela permet d'enchaîner plusieurs opérations dans une seule transaction
(voir app.seed).
"""

import logging
from typing import List, Optional

from app.models import Departments, Employees
from app.schemas import Department, Employee, EmployeeIn
from app.templates import sql_template
from app.transactions import TransactionScope, required_transaction

logger = logging.getLogger(__name__)


class _TableDao:
    """Opérations de schéma communes (DROP / CREATE) pour une table."""

    table = None

    def __init__(self, data_source):
        self.data_source = data_source

    def drop_table_if_exists(self, scope: Optional[TransactionScope] = None) -> None:
        self._execute_ddl(self.table.drop_table_sql(), scope)

    def create_table_if_not_exists(self, scope: Optional[TransactionScope] = None) -> None:
        self._execute_ddl(self.table.create_table_sql(self.data_source.dialect_name), scope)

    def _execute_ddl(self, sql: str, scope: Optional[TransactionScope]) -> None:
        with required_transaction(self.data_source, scope) as tx:
            with tx.connection.prepare(sql) as stmt:
                stmt.execute_update()
        logger.info("DDL exécuté: %s", sql.splitlines()[0])


class DepartmentDao(_TableDao):
    table = Departments

    insert_template = sql_template(
        Departments,
        lambda t: f"INSERT INTO {t.table_name} ({t.columns.sql_names}) VALUES ({t.columns.sql_values})",
    )
    select_all_template = sql_template(
        Departments,
        lambda t: f"SELECT {t.columns.sql_names} FROM {t.table_name} ORDER BY {Departments.code.name}",
    )
    select_by_code_template = sql_template(
        Departments,
        lambda t: (
            f"SELECT {t.columns.sql_names} FROM {t.table_name} "
            f"WHERE {Departments.code.name} = {t.param(Departments.code)}"
        ),
    )
    update_template = sql_template(
        Departments,
        lambda t: (
            f"UPDATE {t.table_name} SET {(t.columns - Departments.code).sql_assignments} "
            f"WHERE {Departments.code.name} = {t.param(Departments.code)}"
        ),
    )
    delete_template = sql_template(
        Departments,
        lambda t: f"DELETE FROM {t.table_name} WHERE {Departments.code.name} = {t.param(Departments.code)}",
    )

    def insert(self, department: Department, scope: Optional[TransactionScope] = None) -> int:
        def bind(b):
            b[Departments.code] = department.code
            b[Departments.name] = department.name
            b[Departments.country_code] = department.country_code
            b[Departments.city] = department.city
            b[Departments.comments] = department.comments
            b[Departments.date_created] = department.date_created
            return b

        with required_transaction(self.data_source, scope) as tx:
            with self.insert_template.prepare_statement(tx.connection, bind) as stmt:
                return stmt.execute_update()

    def find_all(self, scope: Optional[TransactionScope] = None) -> List[Department]:
        with required_transaction(self.data_source, scope) as tx:
            with self.select_all_template.prepare_statement(tx.connection) as stmt:
                rows = stmt.execute_query()
        return [Department.model_validate(row) for row in rows]

    def find_by_code(
        self, code: str, scope: Optional[TransactionScope] = None
    ) -> Optional[Department]:
        with required_transaction(self.data_source, scope) as tx:
            with self.select_by_code_template.prepare_statement(
                tx.connection, {Departments.code: code}
            ) as stmt:
                rows = stmt.execute_query()
        return Department.model_validate(rows[0]) if rows else None

    def update(self, department: Department, scope: Optional[TransactionScope] = None) -> int:
        values = {column: getattr(department, column.name) for column in Departments.columns}
        with required_transaction(self.data_source, scope) as tx:
            with self.update_template.prepare_statement(tx.connection, values) as stmt:
                return stmt.execute_update()

    def delete(self, code: str, scope: Optional[TransactionScope] = None) -> int:
        with required_transaction(self.data_source, scope) as tx:
            with self.delete_template.prepare_statement(
                tx.connection, {Departments.code: code}
            ) as stmt:
                return stmt.execute_update()


class EmployeeDao(_TableDao):
    table = Employees

    # L'id est généré par la base : exclu de l'INSERT
    insert_template = sql_template(
        Employees,
        lambda t: (
            f"INSERT INTO {t.table_name} ({(t.columns - Employees.id).sql_names}) "
            f"VALUES ({(t.columns - Employees.id).sql_values})"
        ),
    )
    select_all_template = sql_template(
        Employees,
        lambda t: f"SELECT {t.columns.sql_names} FROM {t.table_name} ORDER BY {Employees.id.name}",
    )
    select_by_id_template = sql_template(
        Employees,
        lambda t: (
            f"SELECT {t.columns.sql_names} FROM {t.table_name} "
            f"WHERE {Employees.id.name} = {t.param(Employees.id)}"
        ),
    )
    select_by_department_template = sql_template(
        Employees,
        lambda t: (
            f"SELECT {t.columns.sql_names} FROM {t.table_name} "
            f"WHERE {Employees.department_code.name} = {t.param(Employees.department_code)} "
            f"ORDER BY {Employees.id.name}"
        ),
    )

    def insert(self, employee: EmployeeIn, scope: Optional[TransactionScope] = None) -> int:
        def bind(b):
            return (
                b.set(Employees.first_name, employee.first_name)
                .set(Employees.last_name, employee.last_name)
                .set(Employees.age, employee.age)
                .set(Employees.department_code, employee.department_code)
                .set(Employees.comments, employee.comments)
                .set(Employees.date_created, employee.date_created)
            )

        with required_transaction(self.data_source, scope) as tx:
            with self.insert_template.prepare_statement(tx.connection, bind) as stmt:
                return stmt.execute_update()

    def find_all(self, scope: Optional[TransactionScope] = None) -> List[Employee]:
        with required_transaction(self.data_source, scope) as tx:
            with self.select_all_template.prepare_statement(tx.connection) as stmt:
                rows = stmt.execute_query()
        return [Employee.model_validate(row) for row in rows]

    def find_by_id(
        self, employee_id: int, scope: Optional[TransactionScope] = None
    ) -> Optional[Employee]:
        with required_transaction(self.data_source, scope) as tx:
            with self.select_by_id_template.prepare_statement(
                tx.connection, {Employees.id: employee_id}
            ) as stmt:
                rows = stmt.execute_query()
        return Employee.model_validate(rows[0]) if rows else None

    def find_by_department(
        self, department_code: str, scope: Optional[TransactionScope] = None
    ) -> List[Employee]:
        with required_transaction(self.data_source, scope) as tx:
            with self.select_by_department_template.prepare_statement(
                tx.connection, {Employees.department_code: department_code}
            ) as stmt:
                rows = stmt.execute_query()
        return [Employee.model_validate(row) for row in rows]

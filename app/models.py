# app/models.py
"""
Tables de la base de démonstration : départements et employés.
"""

from app.tables import Table, integer, serial, text, timestamp, varchar


class Departments(Table):
    table_name = "departments"

    code = varchar("code", 3).primary_key()
    name = varchar("name", 100).not_null()
    country_code = varchar("country_code", 3).not_null()
    city = varchar("city", 100).not_null()
    comments = text("comments")
    date_created = timestamp("date_created").not_null()


class Employees(Table):
    table_name = "employees"

    id = serial("id")
    first_name = varchar("first_name", 50).not_null()
    last_name = varchar("last_name", 50).not_null()
    age = integer("age").not_null()
    department_code = varchar("department_code", 3).not_null().references(Departments.code)
    comments = text("comments")
    date_created = timestamp("date_created").not_null()

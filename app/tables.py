# app/tables.py
"""
Déclaration des tables : colonnes typées et descripteurs de table.

Une table se déclare comme une sous-classe de `Table` :

    class Departments(Table):
        table_name = "departments"
        code = varchar("code", 3).not_null().primary_key()
        name = varchar("name", 100).not_null()

L'ordre de déclaration des colonnes est l'ordre SQL utilisé partout
(DDL, INSERT, paramètres positionnels). Une fois la classe définie, le
descripteur est immuable et partagé en lecture seule par tous les templates.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable, Optional

# Type "auto-incrément", rendu différemment selon le dialecte (voir _render_type)
SERIAL = "SERIAL"


@dataclass(frozen=True, eq=False)
class Column:
    """Colonne d'une table.

    eq=False : deux colonnes ne sont égales que si c'est le même objet
    (le Binder indexe les valeurs par identité de colonne).
    """

    name: str
    sql_type: str
    python_type: type = str
    nullable: bool = True
    is_primary_key: bool = False
    is_unique: bool = False
    reference: Optional["Column"] = None
    table: Any = field(default=None, repr=False)

    # --------------------
    # Builders (retournent une nouvelle colonne)
    # --------------------
    def not_null(self) -> "Column":
        return replace(self, nullable=False)

    def primary_key(self) -> "Column":
        return replace(self, nullable=False, is_primary_key=True)

    def unique(self) -> "Column":
        return replace(self, is_unique=True)

    def references(self, column: "Column") -> "Column":
        return replace(self, reference=column)

    @property
    def qualified_name(self) -> str:
        if self.table is None:
            return self.name
        return f"{self.table.table_name}.{self.name}"

    def _bind(self, table) -> None:
        # Une colonne appartient à une seule table
        if self.table is not None and self.table is not table:
            raise TypeError(
                f"La colonne '{self.name}' appartient déjà à la table '{self.table.table_name}'"
            )
        object.__setattr__(self, "table", table)


def varchar(name: str, size: int) -> Column:
    return Column(name, f"VARCHAR({size})", str)


def text(name: str) -> Column:
    return Column(name, "TEXT", str)


def integer(name: str) -> Column:
    return Column(name, "INTEGER", int)


def serial(name: str) -> Column:
    return Column(name, SERIAL, int, nullable=False, is_primary_key=True)


def timestamp(name: str) -> Column:
    return Column(name, "TIMESTAMP", datetime)


class ColumnList(tuple):
    """Liste ordonnée de colonnes avec les fragments SQL dérivés.

    `sql_names` et `sql_values` ont toujours le même nombre d'éléments
    et suivent l'ordre de la liste.
    """

    def __new__(cls, columns: Iterable[Column] = ()):
        return super().__new__(cls, columns)

    @property
    def sql_names(self) -> str:
        return ", ".join(c.name for c in self)

    @property
    def sql_values(self) -> str:
        return ", ".join("?" for _ in self)

    @property
    def sql_assignments(self) -> str:
        return ", ".join(f"{c.name} = ?" for c in self)

    def __sub__(self, other):
        if isinstance(other, Column):
            excluded = {id(other)}
        else:
            excluded = {id(c) for c in other}
        return type(self)(c for c in self if id(c) not in excluded)


class Table:
    """Descripteur de table : nom + colonnes ordonnées.

    Les colonnes sont collectées à la définition de la sous-classe
    (`__init_subclass__`). Un nom de colonne en double empêche la
    définition de la classe.
    """

    table_name: str = ""
    columns: ColumnList = ColumnList()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not cls.table_name:
            raise TypeError(f"{cls.__name__} doit définir 'table_name'")

        # vars() respecte l'ordre de déclaration dans le corps de la classe
        columns = [value for value in vars(cls).values() if isinstance(value, Column)]
        seen = set()
        for column in columns:
            if column.name in seen:
                raise TypeError(
                    f"Colonne '{column.name}' déclarée deux fois dans la table '{cls.table_name}'"
                )
            seen.add(column.name)
            column._bind(cls)
        cls.columns = ColumnList(columns)

    def __new__(cls, *args, **kwargs):
        raise TypeError("Les descripteurs de table ne s'instancient pas")

    # --------------------
    # DDL
    # --------------------
    @classmethod
    def create_table_sql(cls, dialect: str = "postgresql") -> str:
        """Génère le `CREATE TABLE IF NOT EXISTS` de la table pour un dialecte donné."""
        lines = [_render_column(c, dialect) for c in cls.columns]
        for column in cls.columns:
            if column.reference is not None:
                ref = column.reference
                lines.append(
                    f"FOREIGN KEY ({column.name}) REFERENCES {ref.table.table_name} ({ref.name})"
                )
        body = ",\n  ".join(lines)
        return f"CREATE TABLE IF NOT EXISTS {cls.table_name} (\n  {body}\n)"

    @classmethod
    def drop_table_sql(cls) -> str:
        return f"DROP TABLE IF EXISTS {cls.table_name}"


def _render_type(column: Column, dialect: str) -> str:
    if column.sql_type != SERIAL:
        return column.sql_type
    if dialect == "sqlite":
        # INTEGER PRIMARY KEY = alias du rowid, donc auto-incrémenté
        return "INTEGER"
    return "SERIAL"


def _render_column(column: Column, dialect: str) -> str:
    parts = [column.name, _render_type(column, dialect)]
    if not column.nullable:
        parts.append("NOT NULL")
    if column.is_primary_key:
        parts.append("PRIMARY KEY")
        if column.sql_type == SERIAL and dialect == "sqlite":
            parts.append("AUTOINCREMENT")
    if column.is_unique and not column.is_primary_key:
        parts.append("UNIQUE")
    return " ".join(parts)

# app/templates.py
"""
Templates de requêtes SQL liés à un descripteur de table.

Un template est construit une fois par "forme" de requête, puis réutilisé :

    insert_department = sql_template(Departments, lambda t:
        f"INSERT INTO {t.table_name} ({t.columns.sql_names}) VALUES ({t.columns.sql_values})"
    )

    with insert_department.prepare_statement(conn, {
        Departments.code: "SEA",
        Departments.name: "Seattle's Office",
        ...
    }) as stmt:
        stmt.execute_update()

Les valeurs sont liées par colonne (et non par numéro de paramètre) : le
template connaît l'ordre des `?` et positionne lui-même les paramètres.
"""

import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from app.errors import MissingBinding, StatementPrepareError
from app.tables import Column, ColumnList

logger = logging.getLogger(__name__)


class Binder:
    """Association colonne -> valeur, en écriture seule, consommée une seule fois.

    S'utilise comme un dict : `binder[Departments.code] = "SEA"`,
    ou en chaîne : `binder.set(Departments.code, "SEA").set(...)`.
    """

    def __init__(self, values: Optional[Mapping[Column, Any]] = None):
        self._values = {}
        self._consumed = False
        if values:
            for column, value in values.items():
                self[column] = value

    def __setitem__(self, column: Column, value: Any) -> None:
        if self._consumed:
            raise RuntimeError("Binder déjà consommé")
        if not isinstance(column, Column):
            raise TypeError(f"Clé de binding invalide (Column attendue): {column!r}")
        self._values[column] = value

    def set(self, column: Column, value: Any) -> "Binder":
        self[column] = value
        return self

    def consume(self, columns: Iterable[Column]) -> List[Any]:
        """Retourne les valeurs dans l'ordre de `columns` ; lève MissingBinding au premier manque."""
        if self._consumed:
            raise RuntimeError("Binder déjà consommé")
        self._consumed = True
        values = []
        for column in columns:
            if column not in self._values:
                raise MissingBinding(column)
            values.append(self._values[column])
        return values


BindSpec = Union[None, Mapping[Column, Any], Callable[[Binder], Optional[Binder]]]


class _RecordingColumnList(ColumnList):
    """ColumnList qui note les colonnes dont elle émet les `?`."""

    def __new__(cls, columns=(), recorder=None):
        obj = super().__new__(cls, columns)
        obj._recorder = recorder
        return obj

    @property
    def sql_values(self) -> str:
        self._recorder.extend(self)
        return super().sql_values

    @property
    def sql_assignments(self) -> str:
        self._recorder.extend(self)
        return super().sql_assignments

    def __sub__(self, other):
        remaining = ColumnList.__sub__(ColumnList(self), other)
        return _RecordingColumnList(remaining, self._recorder)


class TemplateContext:
    """Ce que reçoit la fonction de template : nom de table, colonnes, `param()`."""

    def __init__(self, table):
        self.table = table
        self.table_name = table.table_name
        self.parameters: List[Column] = []
        self.columns = _RecordingColumnList(table.columns, self.parameters)

    def param(self, column: Column) -> str:
        """Placeholder pour une seule colonne (clauses WHERE, SET ...)."""
        self.parameters.append(column)
        return "?"


class SqlTemplate:
    """SQL résolu + colonnes correspondant à ses `?`, dans l'ordre."""

    def __init__(self, table, sql: str, parameters: Tuple[Column, ...]):
        self.table = table
        self.sql = sql
        self.parameters = tuple(parameters)

    @classmethod
    def build(cls, table, template_fn: Callable[[TemplateContext], str]) -> "SqlTemplate":
        context = TemplateContext(table)
        sql = template_fn(context)
        return cls(table, sql, tuple(context.parameters))

    def prepare_statement(self, connection, bind: BindSpec = None):
        """Prépare la requête sur `connection` et positionne les paramètres.

        `bind` : dict {Column: valeur}, ou fonction qui remplit le Binder reçu
        et le retourne. L'appelant doit fermer la requête retournée.
        """
        stmt = connection.prepare(self.sql)
        try:
            if stmt.parameter_count != len(self.parameters):
                raise StatementPrepareError(
                    self.sql,
                    message=(
                        f"{stmt.parameter_count} placeholder(s) pour "
                        f"{len(self.parameters)} colonne(s) liée(s)"
                    ),
                )
            binder = _resolve_binder(bind)
            for index, value in enumerate(binder.consume(self.parameters), start=1):
                stmt.set_parameter(index, value)
        except Exception:
            stmt.close()
            raise
        logger.debug("Requête préparée: %s", stmt)
        return stmt

    def __repr__(self):
        return f"SqlTemplate({self.table.table_name!r}, {self.sql!r})"


def _resolve_binder(bind: BindSpec) -> Binder:
    if bind is None:
        return Binder()
    if isinstance(bind, Binder):
        return bind
    if isinstance(bind, Mapping):
        return Binder(bind)
    binder = Binder()
    result = bind(binder)
    if result is None:
        return binder
    if isinstance(result, Binder):
        return result
    return Binder(result)


sql_template = SqlTemplate.build

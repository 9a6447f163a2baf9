# app/errors.py
"""
Exceptions de la couche d'accès aux données.

Toutes dérivent de DataAccessError, ce qui permet à l'API de les attraper
d'un seul bloc tout en gardant un type précis pour chaque cas :

- MissingBinding        : une colonne utilisée par le SQL n'a pas reçu de valeur
- StatementPrepareError : la préparation de la requête a échoué (SQL invalide, connexion fermée)
- TransactionError      : le commit ou le rollback lui-même a échoué (toujours fatal)
- PoolExhausted         : aucune connexion disponible dans le pool avant le timeout

Les erreurs d'origine sont conservées via `raise ... from e`.
"""


class DataAccessError(Exception):
    """Erreur de base de la couche d'accès aux données."""


class MissingBinding(DataAccessError):
    """Une colonne référencée par le template n'a pas de valeur dans le Binder."""

    def __init__(self, column):
        self.column = column
        super().__init__(f"Aucune valeur liée pour la colonne '{column.qualified_name}'")


class StatementPrepareError(DataAccessError):
    """Échec de préparation d'une requête ; `cause` contient l'erreur du driver."""

    def __init__(self, sql: str, cause: Exception | None = None, message: str | None = None):
        self.sql = sql
        self.cause = cause
        detail = message or (str(cause) if cause is not None else "préparation impossible")
        super().__init__(f"Erreur de préparation de la requête ({detail}): {sql}")


class TransactionError(DataAccessError):
    """Le commit/rollback a échoué, ou la portée transactionnelle est invalide."""


class PoolExhausted(DataAccessError):
    """Le pool n'a fourni aucune connexion dans le délai imparti."""

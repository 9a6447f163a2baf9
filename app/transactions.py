# app/transactions.py
"""
Helper de transactions au-dessus de la DataSource.

Deux façons de délimiter une transaction :

    # 1) Context manager
    with transaction(data_source) as tx:
        dao.insert(department, scope=tx)

    # 2) Fonction "unité de travail"
    with_transaction(data_source, lambda tx: dao.insert(department, scope=tx))

Sémantique "required" (rejoindre ou démarrer) : la portée courante est passée
explicitement. `required_transaction(ds, scope)` réutilise `scope` s'il est
fourni (même connexion, même transaction, pas de commit/rollback propre),
sinon ouvre une nouvelle transaction. Seule la portée la plus externe
commite ou annule.
"""

import enum
import logging
import uuid
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from app.errors import TransactionError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionState(str, enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"
    JOINED = "joined"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionScope:
    """Une transaction sur une connexion empruntée au pool.

    IDLE -> ACTIVE -> COMMITTED | ROLLED_BACK ; JOINED pendant un appel imbriqué.
    """

    def __init__(self, connection):
        self.connection = connection
        self.transaction_id = uuid.uuid4().hex
        self.state = TransactionState.IDLE

    @property
    def is_active(self) -> bool:
        return self.state in (TransactionState.ACTIVE, TransactionState.JOINED)

    def begin(self) -> None:
        if self.state is not TransactionState.IDLE:
            raise TransactionError(f"Transaction {self.transaction_id} déjà démarrée")
        try:
            self.connection.begin()
        except Exception as e:
            raise TransactionError(f"Échec du démarrage de la transaction {self.transaction_id}") from e
        self.state = TransactionState.ACTIVE
        logger.debug("Transaction %s démarrée", self.transaction_id)

    def commit(self) -> None:
        self._require_state(TransactionState.ACTIVE)
        try:
            self.connection.commit()
        except Exception as e:
            raise TransactionError(f"Échec du commit de la transaction {self.transaction_id}") from e
        self.state = TransactionState.COMMITTED
        logger.debug("Transaction %s commitée", self.transaction_id)

    def rollback(self) -> None:
        self._require_state(TransactionState.ACTIVE)
        try:
            self.connection.rollback()
        except Exception as e:
            raise TransactionError(
                f"Échec du rollback de la transaction {self.transaction_id}"
            ) from e
        self.state = TransactionState.ROLLED_BACK
        logger.warning("Transaction %s annulée (rollback)", self.transaction_id)

    @contextmanager
    def join(self) -> Iterator["TransactionScope"]:
        """Rejoint la transaction active ; rend la main à la portée externe à la sortie."""
        if not self.is_active:
            raise TransactionError(
                f"Impossible de rejoindre la transaction {self.transaction_id} ({self.state.value})"
            )
        previous = self.state
        self.state = TransactionState.JOINED
        try:
            yield self
        finally:
            self.state = previous

    def _require_state(self, expected: TransactionState) -> None:
        if self.state is not expected:
            raise TransactionError(
                f"Transaction {self.transaction_id} dans l'état {self.state.value}, "
                f"attendu {expected.value}"
            )

    def __repr__(self):
        return f"TransactionScope({self.transaction_id}, {self.state.value})"


@contextmanager
def transaction(data_source) -> Iterator[TransactionScope]:
    """Nouvelle transaction : commit si succès, rollback puis relance si erreur.

    La connexion est toujours rendue au pool, quel que soit le résultat.
    PoolExhausted est propagée telle quelle si aucune connexion n'est libre.
    """
    connection = data_source.acquire()
    try:
        scope = TransactionScope(connection)
        scope.begin()
        try:
            yield scope
        except BaseException:
            scope.rollback()
            raise
        scope.commit()
    finally:
        connection.release()


@contextmanager
def required_transaction(
    data_source, scope: Optional[TransactionScope] = None
) -> Iterator[TransactionScope]:
    """Rejoint `scope` s'il est fourni, sinon démarre une nouvelle transaction."""
    if scope is not None:
        with scope.join() as joined:
            yield joined
    else:
        with transaction(data_source) as new_scope:
            yield new_scope


def with_transaction(data_source, unit_of_work: Callable[[TransactionScope], T]) -> T:
    with transaction(data_source) as scope:
        return unit_of_work(scope)


def with_required_transaction(
    data_source,
    unit_of_work: Callable[[TransactionScope], T],
    scope: Optional[TransactionScope] = None,
) -> T:
    with required_transaction(data_source, scope) as active:
        return unit_of_work(active)

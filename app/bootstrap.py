# app/bootstrap.py
"""
Composition de l'application (racine de composition).

Les objets sont construits explicitement, dans l'ordre des dépendances :

    Settings -> DataSource -> DepartmentDao / EmployeeDao -> EmployeeReportService

Pas de conteneur d'injection : chaque objet reçoit ses dépendances
par son constructeur. `get_container()` garde une instance unique par process
(même principe que le pool : une DataSource par base).
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from app.dao import DepartmentDao, EmployeeDao
from app.database import DataSource, create_data_source
from app.report import EmployeeReportService
from app.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    settings: Settings
    data_source: DataSource
    department_dao: DepartmentDao
    employee_dao: EmployeeDao
    report_service: EmployeeReportService

    def close(self) -> None:
        self.data_source.dispose()


def build_container(
    settings: Optional[Settings] = None, data_source: Optional[DataSource] = None
) -> AppContainer:
    settings = settings or Settings()
    data_source = data_source or create_data_source(settings)
    logger.info("Source de données initialisée (%s)", data_source.dialect_name)
    return AppContainer(
        settings=settings,
        data_source=data_source,
        department_dao=DepartmentDao(data_source=data_source),
        employee_dao=EmployeeDao(data_source=data_source),
        report_service=EmployeeReportService(data_source=data_source),
    )


@lru_cache(maxsize=1)
def get_container() -> AppContainer:
    """Conteneur unique du process (lazy init au premier appel)."""
    return build_container()


def close_container() -> None:
    """Ferme le pool si le conteneur a été construit, puis vide le cache."""
    if get_container.cache_info().currsize:
        get_container().close()
    get_container.cache_clear()

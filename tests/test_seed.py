"""
Tests de la composition (bootstrap) et du seeding opt-in.
"""

import os
from datetime import datetime
from unittest.mock import patch

import pytest

from app import seed
from app.bootstrap import build_container, close_container, get_container
from app.schemas import Department, EmployeeIn
from app.settings import Settings


class TestBootstrap:

    def test_build_container_wires_one_data_source(self, data_source):
        container = build_container(settings=Settings(), data_source=data_source)

        assert container.department_dao.data_source is data_source
        assert container.employee_dao.data_source is data_source
        assert container.report_service.data_source is data_source

    def test_get_container_is_cached(self, database_url):
        with patch.dict(os.environ, {"DATABASE_URL": database_url}):
            close_container()
            try:
                first = get_container()
                second = get_container()
                assert first is second
                assert first.data_source.dialect_name == "sqlite"
            finally:
                close_container()

        assert get_container.cache_info().currsize == 0

    def test_settings_read_environment(self):
        env = {"SEED_ON_STARTUP": "true", "LOG_LEVEL": "debug", "DB_MAX_OVERFLOW": "2"}
        with patch.dict(os.environ, env):
            current = Settings()

        assert current.SEED_ON_STARTUP is True
        assert current.LOG_LEVEL == "DEBUG"
        assert current.DB_MAX_OVERFLOW == 2

    def test_seed_is_off_by_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Settings().SEED_ON_STARTUP is False


class TestSeed:

    def test_seed_inserts_demo_rows(self, container):
        counts = seed.seed_database(container)

        assert counts == {"departments": 4, "employees": 5}
        codes = [d.code for d in container.department_dao.find_all()]
        assert codes == ["AMS", "BER", "CHI", "SEA"]
        assert len(container.employee_dao.find_all()) == 5

    def test_seed_recreates_tables(self, container):
        seed.seed_database(container)
        seed.seed_database(container)

        assert len(container.department_dao.find_all()) == 4
        assert len(container.employee_dao.find_all()) == 5

    def test_failed_reseed_keeps_existing_data(self, seeded_container):
        """
        CE QUE CE TEST VÉRIFIE :
        ========================
        - Un seeding qui échoue après les DROP TABLE est entièrement annulé
        - Les tables et les lignes existantes (dont PAR) sont intactes
        """
        seeded_container.department_dao.insert(
            Department(code="PAR", name="Paris Office", country_code="FRA", city="Paris",
                       date_created=datetime(2021, 5, 1))
        )
        orphan = EmployeeIn(first_name="Nobody", last_name="Orphan", age=30,
                            department_code="ZZZ", date_created=datetime(2021, 5, 1))

        with patch.object(seed, "initial_employees", return_value=[orphan]):
            with pytest.raises(Exception) as exc_info:
                seed.seed_database(seeded_container)

        assert seeded_container.data_source.is_integrity_error(exc_info.value)
        codes = [d.code for d in seeded_container.department_dao.find_all()]
        assert codes == ["AMS", "BER", "CHI", "PAR", "SEA"]
        assert len(seeded_container.employee_dao.find_all()) == 5

    def test_seed_data_dates_are_in_the_past(self):
        now = datetime.now()
        assert all(d.date_created < now for d in seed.initial_departments())
        assert all(e.date_created < now for e in seed.initial_employees())

    def test_main(self, database_url, capsys):
        with patch.dict(os.environ, {"DATABASE_URL": database_url}):
            seed.main()

        out = capsys.readouterr().out
        assert "4 départements" in out
        assert "5 employés" in out

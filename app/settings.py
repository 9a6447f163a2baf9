# app/settings.py
"""
Module de configuration de l'application.

Ce module centralise toutes les variables de configuration de l'application.
Au lieu de disperser les configurations dans tout le code, on les regroupe ici.

Variables d'environnement :
- DATABASE_URL    : URL de la base (ex: "postgresql://user:pwd@db:5432/company",
                    "sqlite:////data/company.db"). Obligatoire pour ouvrir le pool.
- DB_POOL_SIZE    : nombre de connexions gardées dans le pool (défaut 5)
- DB_MAX_OVERFLOW : connexions supplémentaires au-delà du pool (défaut 0)
- DB_POOL_TIMEOUT : attente max d'une connexion libre, en secondes (défaut 30)
- SEED_ON_STARTUP : "true" pour recréer les tables et les données de démo au démarrage
- LOG_LEVEL       : niveau de logs (défaut "INFO")
- APP_VERSION     : version exposée par l'API (défaut "1.0.0")
"""

import os

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


class Settings:
    """
    Classe qui contient toutes les configurations de l'application.

    Les valeurs sont lues à l'instanciation : `Settings()` relit donc
    l'environnement (pratique dans les tests avec patch.dict(os.environ, ...)).
    """

    def __init__(self):
        self.DATABASE_URL = os.getenv("DATABASE_URL")
        self.DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
        self.DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "0"))
        self.DB_POOL_TIMEOUT = float(os.getenv("DB_POOL_TIMEOUT", "30"))

        # Le seeding détruit les tables : il doit être demandé explicitement
        self.SEED_ON_STARTUP = _env_bool("SEED_ON_STARTUP")

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.APP_VERSION = os.getenv("APP_VERSION", "1.0.0")


# Instance partagée, importée par les modules qui n'ont pas besoin de relire l'environnement
settings = Settings()

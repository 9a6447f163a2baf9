# Package app
"""
Package 'app' : démo départements / employés.

ORGANISATION
============
- tables.py / templates.py / transactions.py : le coeur réutilisable
  (descripteurs de tables, templates SQL liés par colonne, transactions)
- database.py  : pool de connexions (SQLAlchemy) et requêtes préparées
- models.py    : tables `departments` et `employees`
- dao.py / report.py : accès aux données et rapports
- bootstrap.py : construction explicite des objets (pas de conteneur DI)
- seed.py      : données de démo (opt-in)
- main.py      : API FastAPI
"""

# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from app.bootstrap import close_container, get_container
from app.errors import PoolExhausted
from app.logging_config import configure_logging
from app.schemas import (
    Department,
    DepartmentList,
    DepartmentSummary,
    Employee,
    EmployeeIn,
    EmployeeList,
    EmployeeReportRow,
    HealthResponse,
    InsertResponse,
)
from app.seed import seed_database
from app.settings import Settings, settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Démarrage / arrêt de l'application.

    - Configure les logs.
    - Initialise la base de démo uniquement si SEED_ON_STARTUP=true
      (le seeding supprime les tables existantes).
    - Ferme le pool de connexions à l'arrêt.
    """
    current = Settings()
    configure_logging(current.LOG_LEVEL)
    if current.SEED_ON_STARTUP:
        seed_database(get_container())
    yield
    close_container()


# Instanciation de l'application FastAPI avec métadonnées
# - title / description : visibles dans la doc auto (Swagger /docs et ReDoc /redoc)
app = FastAPI(
    title="API Départements & Employés",
    description="Démo : templates SQL, transactions et pool de connexions",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)


def _data_error(e: Exception, action: str) -> HTTPException:
    """Traduit une erreur d'accès aux données en HTTPException.

    - PoolExhausted -> 503 (réessayer plus tard)
    - violation de contrainte (clé dupliquée, FK) -> 409
    - autres -> 500
    """
    if isinstance(e, PoolExhausted):
        return HTTPException(status_code=503, detail=f"Base de données saturée: {e}")
    try:
        integrity = get_container().data_source.is_integrity_error(e)
    except RuntimeError:
        integrity = False
    if integrity:
        return HTTPException(status_code=409, detail=f"Conflit lors de {action}: {e}")
    logger.exception("Erreur lors de %s", action)
    return HTTPException(status_code=500, detail=f"Erreur lors de {action}: {e}")


@app.get("/health", response_model=HealthResponse)
def health():
    """Endpoint de santé de l'API.

    Retourne "ok" si la base répond à SELECT 1, sinon "degraded".
    L'endpoint ne lève jamais d'erreur : il sert aux sondes de disponibilité.
    """
    db_connected = False
    try:
        db_connected = get_container().data_source.test_connection()
    except Exception:
        logger.exception("Base de données indisponible")

    status = "ok" if db_connected else "degraded"
    return HealthResponse(status=status, db_connected=db_connected, version=settings.APP_VERSION)


@app.get("/")
def read_root():
    """Endpoint racine avec informations et liens utiles."""
    return {
        "message": "API Départements & Employés",
        "version": settings.APP_VERSION,
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "departments": "/departments",
            "employees": "/employees",
            "employee_report": "/reports/employees",
            "department_summary": "/reports/departments",
        },
    }


@app.get("/db-test")
def db_test():
    """Endpoint simple pour tester la connectivité à la base de données."""
    try:
        connected = get_container().data_source.test_connection()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Erreur DB: {e}")
    if not connected:
        raise HTTPException(status_code=500, detail="Échec de connexion à la DB")
    return {"status": "ok", "message": "Connexion DB réussie"}


# --------------------
# Départements
# --------------------
@app.get("/departments", response_model=DepartmentList)
def list_departments():
    try:
        departments = get_container().department_dao.find_all()
    except Exception as e:
        raise _data_error(e, "la récupération des départements")
    return DepartmentList(count=len(departments), departments=departments)


@app.get("/departments/{code}", response_model=Department)
def get_department(code: str):
    try:
        department = get_container().department_dao.find_by_code(code)
    except Exception as e:
        raise _data_error(e, "la récupération du département")
    if department is None:
        raise HTTPException(status_code=404, detail=f"Département {code} introuvable")
    return department


@app.post("/departments", response_model=InsertResponse, status_code=201)
def create_department(department: Department):
    try:
        inserted = get_container().department_dao.insert(department)
    except Exception as e:
        raise _data_error(e, "la création du département")
    return InsertResponse(inserted=inserted)


@app.put("/departments/{code}", response_model=Department)
def update_department(code: str, department: Department):
    """Met à jour un département ; le code de l'URL fait foi."""
    department = department.model_copy(update={"code": code})
    try:
        updated = get_container().department_dao.update(department)
    except Exception as e:
        raise _data_error(e, "la mise à jour du département")
    if not updated:
        raise HTTPException(status_code=404, detail=f"Département {code} introuvable")
    return department


@app.delete("/departments/{code}", status_code=204)
def delete_department(code: str):
    try:
        deleted = get_container().department_dao.delete(code)
    except Exception as e:
        # Un département encore référencé par des employés -> 409 (contrainte FK)
        raise _data_error(e, "la suppression du département")
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Département {code} introuvable")


@app.get("/departments/{code}/employees", response_model=EmployeeList)
def list_department_employees(code: str):
    try:
        container = get_container()
        if container.department_dao.find_by_code(code) is None:
            raise HTTPException(status_code=404, detail=f"Département {code} introuvable")
        employees = container.employee_dao.find_by_department(code)
    except HTTPException:
        raise
    except Exception as e:
        raise _data_error(e, "la récupération des employés")
    return EmployeeList(count=len(employees), employees=employees)


# --------------------
# Employés
# --------------------
@app.get("/employees", response_model=EmployeeList)
def list_employees():
    try:
        employees = get_container().employee_dao.find_all()
    except Exception as e:
        raise _data_error(e, "la récupération des employés")
    return EmployeeList(count=len(employees), employees=employees)


@app.get("/employees/{employee_id}", response_model=Employee)
def get_employee(employee_id: int):
    try:
        employee = get_container().employee_dao.find_by_id(employee_id)
    except Exception as e:
        raise _data_error(e, "la récupération de l'employé")
    if employee is None:
        raise HTTPException(status_code=404, detail=f"Employé {employee_id} introuvable")
    return employee


@app.post("/employees", response_model=InsertResponse, status_code=201)
def create_employee(employee: EmployeeIn):
    """Crée un employé ; un code département inconnu donne un 409 (clé étrangère)."""
    try:
        inserted = get_container().employee_dao.insert(employee)
    except Exception as e:
        raise _data_error(e, "la création de l'employé")
    return InsertResponse(inserted=inserted)


# --------------------
# Rapports
# --------------------
@app.get("/reports/employees", response_model=list[EmployeeReportRow])
def employee_report():
    try:
        return get_container().report_service.employee_report()
    except Exception as e:
        raise _data_error(e, "la génération du rapport employés")


@app.get("/reports/departments", response_model=list[DepartmentSummary])
def department_summary():
    try:
        return get_container().report_service.department_summary()
    except Exception as e:
        raise _data_error(e, "la génération de la synthèse par département")

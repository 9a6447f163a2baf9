"""
Schémas Pydantic de l'API départements / employés
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


class Department(BaseModel):
    """Département (bureau) de l'entreprise"""
    code: str = Field(..., min_length=3, max_length=3, description="Code du département (ex: 'SEA')")
    name: str = Field(..., min_length=1, max_length=100, description="Nom du département")
    country_code: str = Field(..., min_length=3, max_length=3, description="Code pays ISO alpha-3 (ex: 'USA')")
    city: str = Field(..., min_length=1, max_length=100, description="Ville")
    comments: Optional[str] = Field(None, description="Commentaires libres")
    date_created: datetime = Field(default_factory=_now, description="Date de création")


class EmployeeIn(BaseModel):
    """Données d'un employé à créer (l'id est généré par la base)"""
    first_name: str = Field(..., min_length=1, max_length=50, description="Prénom")
    last_name: str = Field(..., min_length=1, max_length=50, description="Nom")
    age: int = Field(..., ge=18, le=100, description="Âge de l'employé")
    department_code: str = Field(..., min_length=3, max_length=3, description="Code du département")
    comments: Optional[str] = Field(None, description="Commentaires libres")
    date_created: datetime = Field(default_factory=_now, description="Date d'embauche")


class Employee(EmployeeIn):
    """Employé enregistré en base"""
    id: int = Field(..., description="Identifiant généré")


class EmployeeReportRow(BaseModel):
    """Ligne du rapport employés x départements"""
    employee_id: int
    first_name: str
    last_name: str
    age: int
    department_code: str
    department_name: str
    city: str
    country_code: str


class DepartmentSummary(BaseModel):
    """Statistiques d'effectif d'un département"""
    department_code: str
    department_name: str
    headcount: int = Field(..., ge=0)
    average_age: Optional[float] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None


class InsertResponse(BaseModel):
    """Réponse d'une création"""
    inserted: int


class HealthResponse(BaseModel):
    """Réponse du endpoint de santé"""
    status: str
    db_connected: bool = False
    version: str


class DepartmentList(BaseModel):
    count: int
    departments: List[Department]


class EmployeeList(BaseModel):
    count: int
    employees: List[Employee]

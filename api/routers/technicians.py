"""
Technician endpoints.

POST /technicians/  → Register a technician (a scheduler column)
GET  /technicians/  → List technicians, optionally only those available for scheduling
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db
from api.schemas.job import TechnicianCreate, TechnicianResponse
from models.enums import EmploymentStatus
from models.technician import Technician

router = APIRouter(prefix="/technicians", tags=["technicians"])


@router.post("/", response_model=TechnicianResponse, status_code=201)
async def create_technician(
    tech_in: TechnicianCreate,
    db: AsyncSession = Depends(get_db),
) -> TechnicianResponse:
    technician = Technician(
        full_name=tech_in.full_name,
        email=tech_in.email,
        employment_status=tech_in.employment_status.value,
    )
    db.add(technician)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail=f"Technician {tech_in.email} already exists")
    await db.refresh(technician)
    return TechnicianResponse.model_validate(technician)


@router.get("/", response_model=list[TechnicianResponse])
async def list_technicians(
    available_only: bool = Query(False, description="Hide technicians on leave"),
    db: AsyncSession = Depends(get_db),
) -> list[TechnicianResponse]:
    query = select(Technician).order_by(Technician.full_name, Technician.email)
    if available_only:
        query = query.where(Technician.employment_status != EmploymentStatus.ON_LEAVE.value)
    result = await db.execute(query)
    return [TechnicianResponse.model_validate(t) for t in result.scalars().all()]

"""
Staff CRUD operations.

Staff rows are reference data for attendance and payroll; this module only
creates and looks them up.
"""

import logging
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from salon_backend.fastapi.core.exceptions import StaffNotFound
from salon_backend.fastapi.models.staff import Staff
from salon_backend.fastapi.schemas.staff import StaffCreate

logger = logging.getLogger(__name__)


def get_staff(db: Session, staff_id: UUID) -> Optional[Staff]:
    """Get a staff member by ID, or None."""
    return db.query(Staff).filter(Staff.id == staff_id).first()


def require_staff(db: Session, staff_id: UUID, active_only: bool = False) -> Staff:
    """
    Get a staff member or raise.

    Args:
        db: Database session
        staff_id: Staff UUID
        active_only: Treat deactivated staff as missing

    Raises:
        StaffNotFound: If no (active) staff member has this ID
    """
    staff = get_staff(db, staff_id)
    if staff is None:
        raise StaffNotFound()
    if active_only and not staff.is_active:
        raise StaffNotFound("Staff member not found or inactive")
    return staff


def create_staff(db: Session, staff_data: StaffCreate) -> Staff:
    """Create a staff member."""
    staff = Staff(
        name=staff_data.name,
        position=staff_data.position,
        base_salary=staff_data.base_salary,
        ot_rate_per_hour=staff_data.ot_rate_per_hour,
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)

    logger.info("Created staff member %s (%s)", staff.id, staff.name)
    return staff

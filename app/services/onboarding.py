"""
Onboarding: turns an authenticated, company-less user into the owner of a
new company.

The Company insert and the User update share one transaction. Either both
rows are written or neither is.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError
from app.models.company import Company, company_id_for_owner
from app.models.user import User, UserRole
from app.schemas.auth import CompleteOnboardingRequest

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_SUFFIX = "HVAC Services"


def default_company_name(email: Optional[str]) -> str:
    local_part = (email or "").split("@")[0] or "My"
    return f"{local_part} {DEFAULT_COMPANY_SUFFIX}"


def split_full_name(full_name: str) -> Tuple[str, Optional[str]]:
    """'Jane van der Berg' -> ('Jane', 'van der Berg')."""
    parts = full_name.strip().split(None, 1)
    if not parts:
        return "", None
    return parts[0], (parts[1] if len(parts) > 1 else None)


async def complete_onboarding(
    db: AsyncSession,
    user: User,
    request: CompleteOnboardingRequest,
) -> Tuple[User, Company]:
    """Create the caller's company and make them its owner.

    Raises ConflictError when the user already belongs to a company or has
    already finished onboarding.
    """
    if user.company_id or user.has_completed_onboarding:
        raise ConflictError("Onboarding has already been completed")

    user_id = user.id
    is_solo = request.solo
    company = Company(
        id=company_id_for_owner(user_id),
        name=(request.company_name or "").strip() or default_company_name(user.email),
        is_solo=is_solo,
    )

    try:
        db.add(company)
        # Company row must exist before the user's foreign key points at it
        await db.flush()

        if request.full_name and request.full_name.strip():
            user.first_name, user.last_name = split_full_name(request.full_name)
        user.company_id = company.id
        user.role = UserRole.solo_owner.value if is_solo else UserRole.admin.value
        user.is_owner = True
        user.has_completed_onboarding = True

        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Company %s already exists", company_id_for_owner(user_id))
        raise ConflictError("Onboarding has already been completed")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Onboarding failed for user %s", user_id)
        raise

    await db.refresh(user)
    await db.refresh(company)
    logger.info("Company %s created (solo=%s)", company.id, is_solo)
    return user, company

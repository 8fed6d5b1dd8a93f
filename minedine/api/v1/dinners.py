"""Dinner add-on endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.api.deps import get_current_user, get_db
from minedine.models.dinner import DinnerAddOn
from minedine.models.user import User
from minedine.schemas.moderation import AddOnCreate, AddOnResponse, AddOnUpdate
from minedine.services.dinner_service import dinner_service

router = APIRouter()


@router.get("/{dinner_id}/add-ons", response_model=list[AddOnResponse])
async def list_add_ons(
    dinner_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[DinnerAddOn]:
    return await dinner_service.list_add_ons(db, dinner_id)


@router.post(
    "/{dinner_id}/add-ons",
    response_model=AddOnResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_add_on(
    dinner_id: UUID,
    add_on_data: AddOnCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DinnerAddOn:
    """Add a priced extra to a dinner (host only)."""
    return await dinner_service.create_add_on(
        db,
        current_user,
        dinner_id,
        name=add_on_data.name,
        price=add_on_data.price,
        description=add_on_data.description,
    )


@router.patch("/{dinner_id}/add-ons/{add_on_id}", response_model=AddOnResponse)
async def update_add_on(
    dinner_id: UUID,
    add_on_id: UUID,
    add_on_data: AddOnUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DinnerAddOn:
    """Update an add-on that no confirmed booking includes yet."""
    return await dinner_service.update_add_on(
        db,
        current_user,
        dinner_id,
        add_on_id,
        add_on_data.model_dump(exclude_unset=True),
    )

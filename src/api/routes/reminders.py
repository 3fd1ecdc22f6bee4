from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.reminders import (
    ArmReminderCommand,
    ArmReminderUseCase,
    DisableReminderUseCase,
    RetryReminderUseCase,
    ListRemindersUseCase,
    ReminderResponse,
    ReminderListResponse,
)
from src.depends import get_clock, get_current_claims, get_unit_of_work
from src.domain.entities import BearerClaims

router = APIRouter(tags=["Reminders"])


def _raise_for(error):
    if error.code == "NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    elif error.code == "INVALID_DUE_AT":
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    elif error.code == "INVALID_TRANSITION":
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    raise ServerError(error)


class ArmReminderRequest(BaseModel):
    """
    Arm reminder HTTP request payload

    due_at is ISO 8601; values without an offset are taken as UTC.
    """

    due_at: datetime = Field(..., description="When the reminder fires")
    destination: Optional[EmailStr] = Field(
        None, description="Send here instead of the owner's email"
    )


@router.put(
    "/tasks/{task_id}/reminder",
    status_code=status.HTTP_200_OK,
    response_model=ReminderResponse,
)
async def arm_reminder(
    task_id: UUID,
    request: ArmReminderRequest,
    claims: BearerClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Arm / Re-arm Reminder

    Sets the reminder of an owned task to fire at due_at. Re-arming a sent
    or failed reminder schedules it again.

    Raises:
        - 400 Bad Request: due_at not in the future
        - 404 Not Found: Task missing or owned by someone else
    """
    command = ArmReminderCommand(
        task_id=task_id,
        user_id=UUID(claims.user_id),
        due_at=request.due_at,
        destination=request.destination,
    )
    result = await ArmReminderUseCase(uow, clock).execute(command)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.delete(
    "/tasks/{task_id}/reminder",
    status_code=status.HTTP_200_OK,
    response_model=ReminderResponse,
)
async def disable_reminder(
    task_id: UUID,
    claims: BearerClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """Disable Reminder"""
    result = await DisableReminderUseCase(uow, clock).execute(task_id, UUID(claims.user_id))

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.post(
    "/tasks/{task_id}/reminder/retry",
    status_code=status.HTTP_200_OK,
    response_model=ReminderResponse,
)
async def retry_reminder(
    task_id: UUID,
    claims: BearerClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Retry Failed Reminder

    Moves a failed reminder back to pending so the next tick sends it.

    Raises:
        - 409 Conflict: Reminder is not in the failed state
        - 404 Not Found: Task or reminder missing
    """
    result = await RetryReminderUseCase(uow, clock).execute(task_id, UUID(claims.user_id))

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.get("/reminders", status_code=status.HTTP_200_OK, response_model=ReminderListResponse)
async def list_reminders(
    claims: BearerClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListRemindersUseCase(uow).execute(UUID(claims.user_id))

    if result.is_err():
        raise ServerError(result.error)

    return result.value

"""Current user profile and account endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from portfolio.core.deps import CurrentUser, DbSession
from portfolio.models.user import User
from portfolio.repositories.user import UserRepository
from portfolio.schemas.user import UserProfileUpdate, UserResponse
from portfolio.services import account_service

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: CurrentUser) -> User:
    """Profile of the authenticated user."""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    profile: UserProfileUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> User:
    """
    Update the financial profile.

    Employment status and annual income feed the SRS tax estimate; FI goal
    and target year feed the intelligence report.
    """
    update_data = profile.model_dump(exclude_unset=True)
    if update_data.get("employment_status") is not None:
        update_data["employment_status"] = update_data["employment_status"].value
    return await UserRepository(User, db).update(db_obj=current_user, obj_in=update_data)


@router.get("/me/export")
async def export_current_user(current_user: CurrentUser, db: DbSession) -> JSONResponse:
    """Download the profile and every record the user owns as a JSON file."""
    export = await account_service.export_account(db, current_user)
    filename = f"portfolio-export-{export.exported_at.date().isoformat()}.json"
    return JSONResponse(
        content=export.model_dump(mode="json"),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_current_user(current_user: CurrentUser, db: DbSession) -> None:
    """Delete the account and all of its data. This cannot be undone."""
    await account_service.delete_account(db, current_user)

"""User profile route."""

from fastapi import APIRouter, Depends

from foodcourt.api.deps import CallerContext, get_caller, get_store
from foodcourt.schemas import ApiResponse, UserResponse
from foodcourt.services import UserDirectory
from foodcourt.store import DocumentStore

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_profile(
    caller: CallerContext = Depends(get_caller),
    store: DocumentStore = Depends(get_store),
):
    user = await UserDirectory(store).get_profile(caller.user_id)
    return ApiResponse(message="Profile fetched successfully", data=UserResponse.model_validate(user))

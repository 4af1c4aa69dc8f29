"""Auth API routes — user and admin accounts."""

from fastapi import APIRouter, Depends, status

from smartwatt.application.services import auth_service
from smartwatt.core.responses import api_response
from smartwatt.domain.models.admin import Admin
from smartwatt.domain.models.user import User
from smartwatt.domain.schemas.auth import (
    AdminCreate,
    AdminRead,
    BudgetUpdate,
    LoginRequest,
    UserCreate,
    UserRead,
    UserUpdate,
)
from smartwatt.infrastructure.repositories.user_repository import (
    SQLAlchemyAdminRepository,
    SQLAlchemyUserRepository,
)
from smartwatt.interfaces.api.deps import get_current_user, require_admin
from smartwatt.interfaces.deps import get_admin_repository, get_user_repository

router = APIRouter(prefix="/api", tags=["Auth"])


def _user_session(user: User) -> dict:
    return {
        "user": UserRead.model_validate(user).to_json(),
        "token": auth_service.create_access_token(user.id, auth_service.ROLE_USER),
    }


@router.post("/register")
def register(body: UserCreate, users: SQLAlchemyUserRepository = Depends(get_user_repository)):
    user = auth_service.register_user(users, body)
    return api_response("User registered successfully", _user_session(user), status.HTTP_201_CREATED)


@router.post("/login")
def login(body: LoginRequest, users: SQLAlchemyUserRepository = Depends(get_user_repository)):
    user = auth_service.authenticate_user(users, body.email, body.password)
    return api_response("Login successful", _user_session(user))


@router.get("/user")
def get_me(user: User = Depends(get_current_user)):
    return api_response("User retrieved successfully", UserRead.model_validate(user).to_json())


@router.put("/user")
def update_me(
    body: UserUpdate,
    user: User = Depends(get_current_user),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
):
    user = auth_service.update_user(users, user, body)
    return api_response("User updated successfully", UserRead.model_validate(user).to_json())


@router.delete("/user")
def delete_me(
    user: User = Depends(get_current_user),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
):
    auth_service.delete_user(users, user)
    return api_response("User deleted successfully")


@router.put("/user/budget")
def update_budget(
    body: BudgetUpdate,
    user: User = Depends(get_current_user),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
):
    user = auth_service.update_budget(users, user, body.budget)
    return api_response("Budget updated successfully", UserRead.model_validate(user).to_json())


@router.post("/admin/register")
def register_admin(body: AdminCreate, admins: SQLAlchemyAdminRepository = Depends(get_admin_repository)):
    admin = auth_service.register_admin(admins, body)
    return api_response(
        "Admin registered successfully",
        {
            "admin": AdminRead.model_validate(admin).to_json(),
            "token": auth_service.create_access_token(admin.id, auth_service.ROLE_ADMIN),
        },
        status.HTTP_201_CREATED,
    )


@router.post("/admin/login")
def login_admin(body: LoginRequest, admins: SQLAlchemyAdminRepository = Depends(get_admin_repository)):
    admin = auth_service.authenticate_admin(admins, body.email, body.password)
    return api_response(
        "Login successful",
        {
            "admin": AdminRead.model_validate(admin).to_json(),
            "token": auth_service.create_access_token(admin.id, auth_service.ROLE_ADMIN),
        },
    )


@router.get("/admin")
def admin_home(admin: Admin = Depends(require_admin)):
    return api_response("Welcome Admin", AdminRead.model_validate(admin).to_json())

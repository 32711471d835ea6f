from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from chiya.api.dependencies import (
    get_current_principal,
    get_password_hasher,
    get_token_blocklist,
    get_token_service,
    get_user_repository,
    require_admin,
)
from chiya.application.dto.requests import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UpdateUserStatusRequest,
)
from chiya.application.dto.responses import (
    AuthResponse,
    MessageResponse,
    RefreshResponse,
    UserEnvelopeResponse,
    UsersPageResponse,
)
from chiya.application.ports.repositories import UserRepository
from chiya.application.ports.security import PasswordHasher, TokenBlocklist, TokenService
from chiya.application.use_cases.admin_users import ListUsers, UpdateUserStatus
from chiya.application.use_cases.login_user import LoginUser
from chiya.application.use_cases.register_user import RegisterUser
from chiya.application.use_cases.session_tokens import Logout, Principal, RefreshTokens
from chiya.application.use_cases.user_profile import ChangePassword, GetProfile, UpdateProfile
from chiya.domain.common.ids import UserId

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    request_dto: RegisterRequest,
    user_repository: UserRepository = Depends(get_user_repository),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
) -> AuthResponse:
    use_case = RegisterUser(
        user_repository=user_repository,
        password_hasher=password_hasher,
        token_service=token_service,
    )
    return use_case.execute(request_dto)


@router.post("/login", response_model=AuthResponse)
def login(
    request_dto: LoginRequest,
    user_repository: UserRepository = Depends(get_user_repository),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
) -> AuthResponse:
    use_case = LoginUser(
        user_repository=user_repository,
        password_hasher=password_hasher,
        token_service=token_service,
    )
    return use_case.execute(request_dto)


@router.post("/refresh", response_model=RefreshResponse)
def refresh(
    request_dto: RefreshTokenRequest,
    user_repository: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
) -> RefreshResponse:
    use_case = RefreshTokens(user_repository=user_repository, token_service=token_service)
    return use_case.execute(request_dto)


@router.get("/profile", response_model=UserEnvelopeResponse)
def get_profile(
    principal: Principal = Depends(get_current_principal),
    user_repository: UserRepository = Depends(get_user_repository),
) -> UserEnvelopeResponse:
    return GetProfile(user_repository=user_repository).execute(principal.user.user_id)


@router.put("/profile", response_model=UserEnvelopeResponse)
def update_profile(
    request_dto: UpdateProfileRequest,
    principal: Principal = Depends(get_current_principal),
    user_repository: UserRepository = Depends(get_user_repository),
) -> UserEnvelopeResponse:
    return UpdateProfile(user_repository=user_repository).execute(
        principal.user.user_id, request_dto
    )


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    request_dto: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    user_repository: UserRepository = Depends(get_user_repository),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> MessageResponse:
    use_case = ChangePassword(user_repository=user_repository, password_hasher=password_hasher)
    return use_case.execute(principal.user.user_id, request_dto)


@router.post("/logout", response_model=MessageResponse)
def logout(
    principal: Principal = Depends(get_current_principal),
    blocklist: TokenBlocklist = Depends(get_token_blocklist),
) -> MessageResponse:
    return Logout(blocklist=blocklist).execute(principal)


@router.get("/users", response_model=UsersPageResponse)
def list_users(
    page: int | None = Query(default=None),
    limit: int | None = Query(default=None),
    _: Principal = Depends(require_admin),
    user_repository: UserRepository = Depends(get_user_repository),
) -> UsersPageResponse:
    return ListUsers(user_repository=user_repository).execute(page=page, limit=limit)


@router.put("/users/{user_id}/status", response_model=UserEnvelopeResponse)
def update_user_status(
    user_id: str,
    request_dto: UpdateUserStatusRequest,
    _: Principal = Depends(require_admin),
    user_repository: UserRepository = Depends(get_user_repository),
) -> UserEnvelopeResponse:
    return UpdateUserStatus(user_repository=user_repository).execute(UserId(user_id), request_dto)

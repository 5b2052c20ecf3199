# livemap/services/api/routes.py
"""
HTTP маршруты: пользователи и маркеры.
"""

from fastapi import APIRouter, Depends, status

from livemap.core.markers.service import MarkerService
from livemap.core.users.service import UserService
from livemap.services.api.dependencies import get_marker_service, get_user_service
from livemap.services.api.forms import MarkerForm, read_marker_create_form, read_marker_patch_form
from livemap.shared.models.common import ErrorResponse
from livemap.shared.models.marker import MarkerDTO
from livemap.shared.models.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserPublicDTO,
)

router = APIRouter()


# === USERS ===

@router.get("/users", response_model=list[UserPublicDTO], tags=["Users"])
async def list_users(service: UserService = Depends(get_user_service)):
    return await service.list_users()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    tags=["Users"],
)
async def register(
    request: RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    user = await service.register(request)
    return AuthResponse(user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Users"],
)
async def login(
    request: LoginRequest,
    service: UserService = Depends(get_user_service),
):
    user = await service.login(request)
    return AuthResponse(user=user)


# === MARKERS ===

@router.get("/markers", response_model=list[MarkerDTO], tags=["Markers"])
async def list_markers(service: MarkerService = Depends(get_marker_service)):
    return await service.list_markers()


@router.post(
    "/markers",
    response_model=MarkerDTO,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Markers"],
)
async def create_marker(
    form: MarkerForm = Depends(read_marker_create_form),
    service: MarkerService = Depends(get_marker_service),
):
    """
    Создать маркер (multipart/form-data).

    Поля: latitude, longitude, title, comment, color, userId;
    файлы: photos (до 10), videos (до 10).
    """
    return await service.create_marker(form.data, form.photos, form.videos)


@router.patch(
    "/markers/{marker_id}",
    response_model=MarkerDTO,
    responses={404: {"model": ErrorResponse}},
    tags=["Markers"],
)
async def edit_marker(
    marker_id: str,
    form: MarkerForm = Depends(read_marker_patch_form),
    service: MarkerService = Depends(get_marker_service),
):
    """
    Изменить маркер (multipart/form-data).

    Перезаписываются только переданные title/comment/color;
    новые photos/videos дописываются к существующим.
    """
    return await service.edit_marker(marker_id, form.data, form.photos, form.videos)

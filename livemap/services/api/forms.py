# livemap/services/api/forms.py
"""
Разбор multipart-форм маркеров.

Форма читается вручную: FastAPI подставляет значение по умолчанию вместо
пустой строки в Form-полях, а при редактировании пустая строка — это
валидное значение, отличное от отсутствующего поля.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from fastapi import Request
from starlette.datastructures import FormData, UploadFile

from livemap.common.constants import MediaKind
from livemap.core.markers.repository import EDITABLE_FIELDS
from livemap.shared.models.marker import MarkerCreate, MarkerPatch


@dataclass
class MarkerForm:
    """Разобранная форма: данные маркера и загруженные файлы по полям."""
    data: MarkerCreate | MarkerPatch
    photos: list[UploadFile] = field(default_factory=list)
    videos: list[UploadFile] = field(default_factory=list)


# Самый длинный числовой префикс: "48.85abc" -> 48.85, "1_000" -> 1
_NUMBER_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


def parse_coordinate(raw: str | None) -> float:
    """
    Текст -> float по числовому префиксу строки.
    Строка без числового префикса превращается в NaN (его отвергнет хранилище).
    """
    if raw is None:
        return math.nan
    match = _NUMBER_PREFIX.match(raw.lstrip())
    if match is None:
        return math.nan
    return float(match.group())


def present_text_fields(form: FormData, names: tuple[str, ...]) -> dict[str, str]:
    """Текстовые поля, которые реально присутствуют в форме (включая пустые)."""
    return {
        name: form[name]
        for name in names
        if name in form and isinstance(form[name], str)
    }


def uploaded_files(form: FormData, kind: MediaKind) -> list[UploadFile]:
    """Файлы поля формы; пустые части без имени файла пропускаются."""
    return [
        item
        for item in form.getlist(kind.value)
        if isinstance(item, UploadFile) and item.filename
    ]


def _text(form: FormData, name: str) -> str | None:
    value = form.get(name)
    return value if isinstance(value, str) else None


async def read_marker_create_form(request: Request) -> MarkerForm:
    """Форма POST /markers."""
    form = await request.form()

    created_by = _text(form, "userId") or None
    data = MarkerCreate(
        latitude=parse_coordinate(_text(form, "latitude")),
        longitude=parse_coordinate(_text(form, "longitude")),
        created_by=created_by,
        **present_text_fields(form, EDITABLE_FIELDS),
    )
    return MarkerForm(
        data=data,
        photos=uploaded_files(form, MediaKind.PHOTOS),
        videos=uploaded_files(form, MediaKind.VIDEOS),
    )


async def read_marker_patch_form(request: Request) -> MarkerForm:
    """Форма PATCH /markers/{id}."""
    form = await request.form()

    patch = MarkerPatch(**present_text_fields(form, EDITABLE_FIELDS))
    return MarkerForm(
        data=patch,
        photos=uploaded_files(form, MediaKind.PHOTOS),
        videos=uploaded_files(form, MediaKind.VIDEOS),
    )

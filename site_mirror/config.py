# === FILE: site_mirror/config.py ===
"""
Модуль для загрузки и валидации конфигурации SiteMirror.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class MirrorConfig(BaseModel):
    """Конфигурация для одного запуска зеркалирования."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: str = Field(..., min_length=1, description="Стартовый URL зеркала.")
    dest_dir: Path = Field(..., description="Каталог, куда сохраняются страницы.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один HTTP-запрос (секунд).")
    user_agent: str = Field("SiteMirror/0.1", min_length=1, description="Заголовок User-Agent.")
    max_concurrency: Optional[int] = Field(
        None, ge=1, description="Лимит одновременных запросов на уровне (None - без лимита)."
    )
    save_error_pages: bool = Field(
        True, description="Сохранять ли ответы со статусом не 2xx как обычные страницы."
    )

    @field_validator("start_url")
    @classmethod
    def _check_start_url(cls, v: str) -> str:
        # строка сохраняется как есть: сравнение URL побайтовое
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"ожидается абсолютный http(s) URL, получено {v!r}")
        return v

    @field_validator("dest_dir", mode="before")
    @classmethod
    def _check_dest_dir(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            raise ValueError("каталог назначения не задан")
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path, None]) -> dict[str, Any]:
    """
    Читает YAML или JSON в словарь без валидации.
    При path=None используется configs/default.yaml, если он есть, иначе пустой словарь.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return {}
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None]) -> MirrorConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект MirrorConfig.
    При отсутствии указанного файла бросает FileNotFoundError.
    """
    return MirrorConfig(**read_config_file(path))


def build_config(path: Union[str, Path, None] = None, **overrides: Any) -> MirrorConfig:
    """Объединяет файл конфига с параметрами CLI (значения None игнорируются)."""
    data = read_config_file(path)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return MirrorConfig(**data)

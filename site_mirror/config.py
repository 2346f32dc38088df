# === FILE: site_mirror/config.py ===
"""
Модуль для загрузки и валидации конфигурации зеркалирования SiteMirror.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, List, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_HOST_RE = re.compile(r"^[^\s/?#]+$")
_DEFAULT_PORTS = {"http": "80", "https": "443"}


class MirrorConfig(BaseModel):
    """Конфигурация для одного запуска зеркалирования сайта."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field(..., min_length=1, description="Хост сайта (возможно с портом).")
    protocol: Literal["http", "https"] = Field("https", description="Схема для сборки URL.")
    other_urls: List[str] = Field(
        default_factory=list, description="Ссылки, недостижимые рекурсивным обходом."
    )
    output_dir: Path = Field(Path("public"), description="Корень локального зеркала.")
    log_file: Optional[Path] = Field(
        Path("log.txt"), description="Журнал запуска (очищается при старте)."
    )
    concurrency: int = Field(8, ge=1, description="Число одновременных загрузок.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SiteMirrorBot/1.0", min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 429/5xx.")
    retry_backoff: float = Field(1.0, ge=0, description="База экспоненциальной задержки (секунд).")

    @model_validator(mode="before")
    def _canonical_host(cls, data: Any) -> Any:
        # scheme, trailing slash and the default port never belong to the site identity
        if not isinstance(data, dict) or not isinstance(data.get("host"), str):
            return data
        host = _SCHEME_RE.sub("", data["host"].strip()).rstrip("/")
        port = _DEFAULT_PORTS.get(str(data.get("protocol", "https")))
        if port and host.endswith(f":{port}"):
            host = host[: -len(port) - 1]
        return {**data, "host": host}

    @field_validator("host")
    def _check_host(cls, v: str) -> str:
        if not _HOST_RE.match(v):
            raise ValueError(f"host must be a bare host[:port], got {v!r}")
        return v.lower()

    @property
    def site_root(self) -> str:
        """Корневой URL сайта: ``protocol://host``."""
        return f"{self.protocol}://{self.host}"


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


def load_config(path: Union[str, Path, None]) -> MirrorConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект MirrorConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return MirrorConfig(**data)
    except ValidationError:
        raise

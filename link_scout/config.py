"""
Модуль для загрузки и валидации конфигурации LinkScout.
Используется Pydantic для описания схемы и проверки данных.

Источники настроек (в порядке приоритета, от низшего к высшему):
файл YAML/JSON → переменные окружения (и ``.env``) → опции командной строки.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

LoadState = Literal["load", "domcontentloaded", "networkidle"]
Renderer = Literal["http", "browser"]


class CrawlConfig(BaseModel):
    """Конфигурация одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_urls: List[str] = Field(
        default_factory=list, validate_default=True, description="Стартовые URL (seed), в порядке передачи."
    )
    same_domain_only: bool = Field(True, description="Оставаться в пределах хостов стартовых URL.")
    max_requests_per_crawl: int = Field(500, ge=1, description="Жесткий лимит числа запросов за запуск.")
    max_concurrency: int = Field(10, ge=1, description="Число параллельных воркеров.")
    navigation_timeout: float = Field(45.0, gt=0, description="Таймаут загрузки страницы (секунд).")
    request_handler_timeout: float = Field(90.0, gt=0, description="Таймаут обработчика страницы (секунд).")
    wait_until: LoadState = Field("networkidle", description="Условие готовности страницы (browser).")
    headless: bool = Field(True, description="Запускать браузер без окна.")
    renderer: Renderer = Field("http", description="http: aiohttp, browser: Playwright.")
    user_agent: str = Field("LinkScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    max_request_retries: int = Field(2, ge=0, description="Повторы при 5xx/429/сетевых ошибках.")

    @field_validator("start_urls", mode="before")
    def _split_and_strip(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            return [str(u).strip() for u in v if u is not None and str(u).strip()]
        return v

    @field_validator("start_urls")
    def _require_seed(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("No start URL provided. Pass a URL as a CLI arg or set START_URL.")
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


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Читает YAML или JSON и возвращает сырой словарь настроек."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlConfig.
    Без пути используется configs/default.yaml; если его нет, FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path = _DEFAULT_CFG
    return CrawlConfig(**read_config_file(path))


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Настройки из переменных окружения (START_URL, SAME_DOMAIN_ONLY, ...)."""
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}

    start = env.get("START_URL")
    if start:
        seeds = [s.strip() for s in start.split(",") if s.strip()]
        if seeds:
            out["start_urls"] = seeds
    if "SAME_DOMAIN_ONLY" in env:
        out["same_domain_only"] = env["SAME_DOMAIN_ONLY"].strip().lower() == "true"
    if env.get("WAIT_UNTIL"):
        out["wait_until"] = env["WAIT_UNTIL"].strip()
    if "PLAYWRIGHT_HEADFUL" in env:
        out["headless"] = env["PLAYWRIGHT_HEADFUL"].strip() != "1"
    if env.get("MAX_REQUESTS_PER_CRAWL"):
        out["max_requests_per_crawl"] = env["MAX_REQUESTS_PER_CRAWL"].strip()
    if env.get("MAX_CONCURRENCY"):
        out["max_concurrency"] = env["MAX_CONCURRENCY"].strip()
    return out


def build_config(
    path: Union[str, Path, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> CrawlConfig:
    """
    Собирает итоговую конфигурацию: файл → окружение → ``overrides`` (CLI).
    Значения ``None`` в overrides игнорируются; пустой список start_urls тоже.
    """
    if use_dotenv and environ is None:
        load_dotenv()

    data: Dict[str, Any] = {}
    if path is not None:
        data.update(read_config_file(path))
    data.update(env_overrides(environ))
    for key, value in (overrides or {}).items():
        if value is None or (key == "start_urls" and not value):
            continue
        data[key] = value

    return CrawlConfig(**data)


__all__ = [
    "CrawlConfig",
    "LoadState",
    "Renderer",
    "load_config",
    "read_config_file",
    "env_overrides",
    "build_config",
]

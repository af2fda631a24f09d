from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ecolife_coach.catalog import ECO_CATALOG, HEALTH_CATALOG
from ecolife_coach.constants import (
    BASE_POINTS,
    COMPLETION_THRESHOLD,
    DEFAULT_NAMESPACE,
    ENTRIES_LIMIT,
    KEEP_DAYS,
    NOTIFICATIONS_LIMIT,
    RECENT_LIMIT,
)
from ecolife_coach.models import Section, Task, ViewMode


class ConfigError(ValueError):
    """Raised when the engine configuration from the environment is invalid."""


_ENV_FIELDS: dict[str, str] = {
    "ECOLIFE_NAMESPACE": "namespace",
    "ECOLIFE_BASE_POINTS": "base_points",
    "ECOLIFE_KEEP_DAYS": "keep_days",
    "ECOLIFE_ENTRIES_LIMIT": "entries_limit",
    "ECOLIFE_RECENT_LIMIT": "recent_limit",
    "ECOLIFE_COMPLETION_THRESHOLD": "completion_threshold",
}


class EngineConfig(BaseModel):
    """Everything an engine instance needs besides storage and clock."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1)
    base_points: int = Field(default=BASE_POINTS, ge=0)
    keep_days: int = Field(default=KEEP_DAYS, ge=1)
    entries_limit: int = Field(default=ENTRIES_LIMIT, ge=1)
    recent_limit: int = Field(default=RECENT_LIMIT, ge=0)
    completion_threshold: int = Field(default=COMPLETION_THRESHOLD, ge=1)
    notifications_limit: int = Field(default=NOTIFICATIONS_LIMIT, ge=1)
    default_mode: ViewMode = ViewMode.FOCUS
    health_catalog: tuple[Task, ...] = HEALTH_CATALOG
    eco_catalog: tuple[Task, ...] = ECO_CATALOG

    @model_validator(mode="after")
    def _unique_catalog_ids(self) -> "EngineConfig":
        for section in Section:
            ids = [task.id for task in self.catalog(section)]
            if len(ids) != len(set(ids)):
                raise ValueError(f"duplicate task ids in {section.value} catalog")
        return self

    def catalog(self, section: Section) -> tuple[Task, ...]:
        if section is Section.HEALTH:
            return self.health_catalog
        return self.eco_catalog

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env_map = env if env is not None else os.environ
        overrides: dict[str, object] = {}
        for variable, field_name in _ENV_FIELDS.items():
            raw_value = env_map.get(variable)
            if raw_value is None or raw_value.strip() == "":
                continue
            overrides[field_name] = raw_value.strip()

        try:
            return cls.model_validate(overrides)
        except ValidationError as exc:
            raise ConfigError(f"Invalid EcoLife configuration: {exc}") from exc


__all__ = ["ConfigError", "EngineConfig"]

"""Project answers and the template context derived from them.

``ProjectConfig`` is the record produced by the question flow (or loaded from
an answers file).  ``build_context`` turns it into the flat, read-only mapping
that drives template rendering: every scalar answer under its template name,
one boolean per database engine, cased variants of the project name and the
current year.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

TemplateContext = Mapping[str, Any]

LICENSES: list[str] = ["MIT", "Apache-2.0", "GPL-3.0", "BSD-3-Clause", "Unlicense"]


class DatabaseEngine(str, Enum):
    """Database engines the generated backend can be wired for."""

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    MONGODB = "mongodb"


# Feature toggle attribute -> key used by the templates.
FEATURE_FLAGS: dict[str, str] = {
    "authentication": "authentication",
    "swagger": "swagger",
    "testing": "testing",
    "docker": "docker",
    "redis": "redis",
    "websockets": "websockets",
    "background_jobs": "backgroundJobs",
    "cors": "cors",
    "rate_limit": "rateLimit",
    "monitoring": "monitoring",
}


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """Pydantic model describing the project to scaffold.

    Attribute names are snake_case; the camelCase template spellings
    (``backgroundJobs``, ``rateLimit``) are accepted as aliases and used when
    serialising.  Defaults match the non-interactive ``--yes`` answers.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Project (npm package) name")
    description: str = Field(default="A production-ready backend API")
    author: str = Field(default="")
    version: str = Field(default="1.0.0")
    license: str = Field(default="MIT")
    typescript: bool = Field(default=True, description="Emit TypeScript instead of JavaScript")
    database: DatabaseEngine = Field(default=DatabaseEngine.POSTGRESQL)

    authentication: bool = Field(default=True, description="JWT authentication")
    swagger: bool = Field(default=True, description="Swagger/OpenAPI docs")
    testing: bool = Field(default=True, description="Jest + Supertest setup")
    docker: bool = Field(default=True, description="Docker configuration")
    redis: bool = Field(default=True, description="Redis caching and sessions")
    websockets: bool = Field(default=False, description="Socket.io support")
    background_jobs: bool = Field(default=True, alias="backgroundJobs")
    cors: bool = Field(default=True)
    rate_limit: bool = Field(default=True, alias="rateLimit")
    monitoring: bool = Field(default=True, description="Health checks and metrics")

    @property
    def features(self) -> list[str]:
        """Enabled feature toggles, in template spelling."""
        return [key for attr, key in FEATURE_FLAGS.items() if getattr(self, attr)]

    # -- Serialisation -----------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the answers to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        """Load previously saved answers from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------


def build_context(config: ProjectConfig, *, today: date | None = None) -> TemplateContext:
    """Build the read-only template context for *config*.

    Args:
        config: The validated project answers.
        today: Date used for ``currentYear``; defaults to ``date.today()``.

    Returns:
        A ``MappingProxyType`` over the context dict.
    """
    ctx: dict[str, Any] = config.model_dump(by_alias=True, mode="json")
    ctx["features"] = config.features

    for engine in DatabaseEngine:
        ctx[engine.value] = engine is config.database

    ctx["kebabCase"] = _to_kebab(config.name)
    ctx["camelCase"] = _to_camel(config.name)
    ctx["pascalCase"] = _to_pascal(config.name)
    ctx["currentYear"] = str((today or date.today()).year)

    return MappingProxyType(ctx)


# ---------------------------------------------------------------------------
# Name casing helpers
# ---------------------------------------------------------------------------


def _to_kebab(name: str) -> str:
    """``'My Api'`` -> ``'my-api'``."""
    return re.sub(r"\s+", "-", name.lower())


def _to_camel(name: str) -> str:
    """``'my-backend api'`` -> ``'myBackendApi'``."""
    return re.sub(r"[-\s]+(.)?", lambda m: m.group(1).upper() if m.group(1) else "", name)


def _to_pascal(name: str) -> str:
    """``'my-backend'`` -> ``'MyBackend'``."""
    camel = _to_camel(name)
    return camel[:1].upper() + camel[1:]

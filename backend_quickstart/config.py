"""backend-quickstart runtime settings.

Generator-wide knobs that are independent of any single project: where the
template tree lives and whether rendering is strict about missing variables.
Settings are a Pydantic v2 model so they validate at construction time and can
be built from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "templates"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Global generator settings.

    Instances are created once by the CLI (or by a test) and handed to
    ``ProjectGenerator``; nothing reads them from ambient state.
    """

    template_dir: Path = Field(
        default=DEFAULT_TEMPLATE_DIR,
        description="Root of the template tree to materialise",
    )
    strict: bool = Field(
        default=False,
        description="Fail on substitutions that name a missing context key",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            QUICKSTART_TEMPLATE_DIR, QUICKSTART_STRICT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("QUICKSTART_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["QUICKSTART_TEMPLATE_DIR"])
        if os.environ.get("QUICKSTART_STRICT"):
            kwargs["strict"] = os.environ["QUICKSTART_STRICT"].strip().lower() in _TRUTHY
        return cls(**kwargs)

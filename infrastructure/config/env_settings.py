# infrastructure/config/env_settings.py
from __future__ import annotations

import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from application.services.execution_settings import ExecutionSettings
from domain.exceptions import ConfigurationError

ENV_PREFIX = "STEPWRIGHT_"

# .env at the project root, if present
_env_path = Path(__file__).parent.parent.parent / ".env"


def _margin(raw: str) -> Dict[str, str]:
    return {side: raw for side in ("top", "right", "bottom", "left")}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ExecutionSettings:
    """
    Build ExecutionSettings from STEPWRIGHT_* variables.

    STEPWRIGHT_PDF_MARGIN takes one CSS length applied to every side.
    Unset variables keep the defaults.
    """
    if environ is None:
        if _env_path.exists():
            load_dotenv(_env_path)
        environ = os.environ

    overrides: Dict[str, Any] = {}
    for f in fields(ExecutionSettings):
        raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None or raw == "":
            continue
        if f.name == "pdf_margin":
            overrides[f.name] = _margin(raw)
        elif f.name.endswith(("_ms", "_sec")):
            try:
                overrides[f.name] = int(raw)
            except ValueError:
                raise ConfigurationError(f"{ENV_PREFIX}{f.name.upper()} must be an integer, got {raw!r}")
        else:
            overrides[f.name] = raw

    return ExecutionSettings(**overrides)

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from domain.exceptions import TemplateLoadError
from infrastructure.template.base_loader import TemplateLoaderBase


class JsonTemplateLoader(TemplateLoaderBase):
    def _load_file(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            try:
                return json.load(handle)
            except json.JSONDecodeError as exc:
                raise TemplateLoadError(f"Invalid JSON in {path}: {exc}") from exc

"""
Load tab templates from YAML files
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from domain.exceptions import TemplateLoadError
from infrastructure.template.base_loader import TemplateLoaderBase


class YamlTemplateLoader(TemplateLoaderBase):
    def _load_file(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as f:
            try:
                return yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise TemplateLoadError(f"Invalid YAML in {path}: {exc}") from exc

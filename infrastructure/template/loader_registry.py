from __future__ import annotations

from pathlib import Path
from typing import Dict

from domain.exceptions import TemplateLoadError
from infrastructure.template.base_loader import TemplateLoaderBase
from infrastructure.template.json_loader import JsonTemplateLoader
from infrastructure.template.yaml_loader import YamlTemplateLoader


class TemplateLoaderRegistry:
    def __init__(self) -> None:
        self._loaders: Dict[str, TemplateLoaderBase] = {
            ".yaml": YamlTemplateLoader(),
            ".yml": YamlTemplateLoader(),
            ".json": JsonTemplateLoader(),
        }

    def get_loader(self, path: Path) -> TemplateLoaderBase:
        ext = path.suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise TemplateLoadError(f"Unsupported template format: {ext}")
        return loader

"""Find template files by ID."""
from pathlib import Path
from typing import Optional


class TemplateFileFinder:
    """Search template files under the given base directory."""
    
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir
    
    def find_by_id(self, template_id: str) -> Optional[Path]:
        """
        Find a template file by template ID.

        Args:
            template_id: Template ID (e.g., "news-listing")

        Returns:
            The Path if found, otherwise None.
        """
        priority = [".json", ".yaml", ".yml"]
        candidates: list[Path] = []

        for ext in priority:
            filename = f"{template_id}{ext}"
            for file_path in self.base_dir.rglob(filename):
                if file_path.is_file():
                    candidates.append(file_path)

        if not candidates:
            return None

        # .json wins over YAML variants of the same id
        candidates.sort(key=lambda path: (priority.index(path.suffix), str(path)))
        return candidates[0]

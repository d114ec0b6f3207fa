"""Pydantic schemas for files hoard reads and writes.

The manifest declares where each named object should be materialized:

```json
{
  "item-name-1": ["path1/item-name-1", "path2/item-name-1"],
  "item-name-2": ["path1/item-name-2", "path3/item-name-2"]
}
```

Paths are relative to the repository root.
"""

import json
from pathlib import Path, PurePosixPath
from typing import Dict, List

from pydantic import RootModel, ValidationError, field_validator

from hoard.config import MARKER_DIR_NAME
from hoard.exceptions import FileOperationError, InvalidManifestError, PathOutsideRepositoryError


def normalize_manifest_path(path: str) -> str:
    """Normalize a manifest path to a clean relative POSIX path.

    Only `/` separates components; any other character, backslash included,
    is part of a file name.

    Raises:
        PathOutsideRepositoryError: If the path is absolute or escapes the root
        InvalidManifestError: If the path lies inside the marker directory
    """
    if not path.strip():
        raise ValueError("path must be a non-empty string")
    if path.startswith("/"):
        raise PathOutsideRepositoryError(path)

    parts = [part for part in path.split("/") if part not in ("", ".")]
    if not parts or ".." in parts:
        raise PathOutsideRepositoryError(path)
    if parts[0] == MARKER_DIR_NAME:
        raise InvalidManifestError(f"path is inside the reserved {MARKER_DIR_NAME} directory", path)
    return str(PurePosixPath(*parts))


class Manifest(RootModel[Dict[str, List[str]]]):
    """Mapping of object name to the ordered, de-duplicated paths it should appear at."""

    @field_validator("root")
    @classmethod
    def normalize_paths(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        normalized = {}
        for name, paths in v.items():
            if not name or "/" in name:
                raise ValueError(f"invalid object name: {name!r}")
            # dict.fromkeys keeps first-seen order while dropping repeats
            normalized[name] = list(dict.fromkeys(normalize_manifest_path(p) for p in paths))
        return normalized

    @classmethod
    def read(cls, path: Path) -> "Manifest":
        """
        Load and validate a manifest file.

        Raises:
            FileOperationError: If the file cannot be read
            InvalidManifestError: If the content is not a valid manifest
            PathOutsideRepositoryError: If a listed path escapes the root
        """
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise FileOperationError("read manifest", path, e) from e

        try:
            return cls.model_validate_json(content)
        except ValidationError as e:
            raise InvalidManifestError(f"invalid manifest: {e.error_count()} error(s)\n{e}", path) from e

    def write(self, path: Path) -> None:
        """Write the manifest as pretty-printed JSON with sorted names."""
        try:
            path.write_text(self.to_json() + "\n", encoding="utf-8")
        except OSError as e:
            raise FileOperationError("write manifest", path, e) from e

    def to_json(self) -> str:
        return json.dumps(dict(sorted(self.root.items())), indent=2)

    def names(self) -> List[str]:
        return sorted(self.root)

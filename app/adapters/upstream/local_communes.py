"""Optional local commune directory.

A JSON file holding a list of commune records can be deployed next to the
proxy. Commune lookups consult it first and only reach the upstream API when
it has no match for the requested postal code.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class LocalCommuneDirectory:
    """Prefix search over commune records loaded from a JSON file."""

    def __init__(self, records: list[dict[str, Any]]) -> None:
        self._records = records

    def __len__(self) -> int:
        return len(self._records)

    @classmethod
    def from_file(cls, path: str | Path) -> LocalCommuneDirectory | None:
        """Load the directory, or return None when the file is unusable.

        Args:
            path: Location of a JSON file containing a list of objects.

        Returns:
            Loaded directory, or None if the file is missing or malformed.
        """
        file_path = Path(path)
        try:
            raw = json.loads(file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.warning("local_communes.missing", extra={"file_path": str(file_path)})
            return None
        except (OSError, ValueError) as exc:
            logger.warning(
                "local_communes.unreadable",
                extra={"file_path": str(file_path), "error_msg": str(exc)},
            )
            return None

        if not isinstance(raw, list):
            logger.warning("local_communes.not_a_list", extra={"file_path": str(file_path)})
            return None

        records = [r for r in raw if isinstance(r, dict)]
        logger.info(
            "local_communes.loaded",
            extra={"file_path": str(file_path), "records": len(records)},
        )
        return cls(records)

    def search(self, postal: str) -> list[dict[str, Any]]:
        """Return records whose ``code_postal`` starts with ``postal``."""
        return [r for r in self._records if str(r.get("code_postal", "")).startswith(postal)]

"""Custom domain to tenant slug mapping."""

import json
import logging
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class DomainMap:
    """Read-only map from a custom domain to a tenant slug.

    Keys and values are normalized to lower case; blank values are ignored.
    The map only changes through an explicit `reload`.
    """

    def __init__(self, mapping: Optional[Mapping[str, Any]] = None):
        self._entries: Dict[str, str] = self._normalize(mapping or {})

    @staticmethod
    def _normalize(mapping: Mapping[str, Any]) -> Dict[str, str]:
        entries: Dict[str, str] = {}
        for domain, slug in mapping.items():
            if not isinstance(slug, str) or not slug.strip():
                continue
            key = str(domain).strip().lower()
            if key:
                entries[key] = slug.strip().lower()
        return entries

    @classmethod
    def from_json(cls, raw: Optional[str]) -> "DomainMap":
        """Build a map from a JSON object string.

        Malformed input is logged and yields an empty map.
        """
        if not raw or not raw.strip():
            return cls()
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Ignoring malformed TENANT_DOMAIN_MAP: {e}")
            return cls()
        if not isinstance(data, dict):
            logger.warning("Ignoring TENANT_DOMAIN_MAP: expected a JSON object")
            return cls()
        return cls(data)

    def lookup(self, domain: Optional[str]) -> Optional[str]:
        if not domain:
            return None
        return self._entries.get(domain.strip().lower())

    def reload(self, mapping: Mapping[str, Any]) -> None:
        """Replace every entry at once."""
        self._entries = self._normalize(mapping)
        logger.info(f"Reloaded custom domain map ({len(self._entries)} entries)")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, domain: object) -> bool:
        return isinstance(domain, str) and domain.strip().lower() in self._entries

"""AUR RPC client producing the foreign package index."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request

from pacup.config.settings import Settings
from pacup.models.package import ForeignPackage

logger = logging.getLogger(__name__)

# Keeps request URLs well under the AUR's URI length limit
MAX_NAMES_PER_REQUEST = 150


class AURError(Exception):
    """Raised when the AUR cannot be queried or returns an error."""


class AURClient:
    """Query package metadata from the AUR RPC interface."""

    def __init__(self, base_url: str = "https://aur.archlinux.org", timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, cfg: Settings) -> AURClient:
        return cls(cfg.aur_url, timeout=cfg.request_timeout)

    def _info_url(self, names: list[str]) -> str:
        query = [("v", "5"), ("type", "info")] + [("arg[]", n) for n in names]
        return f"{self.base_url}/rpc/?{urllib.parse.urlencode(query)}"

    def _get_json(self, url: str) -> dict:
        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as resp:
                data = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            raise AURError(f"AUR request failed: HTTP {e.code}: {e.reason}") from e
        except (urllib.error.URLError, OSError) as e:
            raise AURError(f"AUR request failed: {e}") from e
        except json.JSONDecodeError as e:
            raise AURError(f"AUR returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise AURError("AUR returned an unexpected response")
        if data.get("type") == "error":
            raise AURError(f"AUR error: {data.get('error', 'unknown error')}")
        return data

    def info(self, names: list[str]) -> dict[str, ForeignPackage]:
        """Return ``{name: ForeignPackage}`` for the names known to the AUR."""
        result: dict[str, ForeignPackage] = {}
        for start in range(0, len(names), MAX_NAMES_PER_REQUEST):
            chunk = names[start:start + MAX_NAMES_PER_REQUEST]
            data = self._get_json(self._info_url(chunk))
            for entry in data.get("results") or []:
                pkg = ForeignPackage.from_dict(entry)
                if pkg.name:
                    result[pkg.name] = pkg
        return result

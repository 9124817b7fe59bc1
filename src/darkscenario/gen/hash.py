from __future__ import annotations

import hashlib
import json
from typing import Any

from darkscenario.gen.models import GeneratedScenario, MapLayout


def _canonical_digest(payload: Any) -> str:
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def scenario_payload_hash(payload: dict[str, Any]) -> str:
    return _canonical_digest(payload)


def scenario_hash(scenario: GeneratedScenario) -> str:
    return _canonical_digest(scenario.to_dict())


def layout_hash(layout: MapLayout) -> str:
    """Digest of tile placement and doors only, ignoring token allocation."""
    payload = layout.to_dict()
    for tile in payload["placedTiles"]:
        tile.pop("tokens", None)
    return _canonical_digest(payload)

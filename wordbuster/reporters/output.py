"""Result persistence."""

import json
from typing import Dict, Iterable


def save_results(path: str, records: Iterable[Dict]):
    """Write accepted results as a JSON array."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(list(records), f, indent=2)
        f.write("\n")

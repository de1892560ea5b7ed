"""
Print the default wellness tips as JSON, as loaded into every fresh store.

Usage:
    python scripts/seed_wellness_tips.py > tips.json
"""
import json

from medora.services import InMemoryStore, seed_wellness_tips
from medora.utils import setup_logging


def main() -> None:
    setup_logging("WARNING")  # stdout carries the output
    store = InMemoryStore()
    tips = seed_wellness_tips(store)
    print(json.dumps([t.to_dict() for t in tips], indent=2))


if __name__ == "__main__":
    main()

"""Bulk-load a raw restricted-word list into the word store.

Usage:
    python scripts/import_words.py --in data/restricted_raw.txt
"""

import argparse
import sys
from pathlib import Path
from typing import Iterable

from tqdm import tqdm

try:
    from src.config import get_settings
except ImportError:
    sys.path.insert(0, str(Path(__file__).parent.parent))
    from src.config import get_settings
from src.db import init_db, make_engine, make_session_factory
from src.word_store import RestrictedWordStore, StoreError


def load_words(path: Path) -> list[str]:
    """Load raw words, strip and lowercase, deduplicate while preserving order."""
    words: list[str] = []
    seen: set[str] = set()
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            w = line.strip().lower()
            if w and w not in seen:
                words.append(w)
                seen.add(w)
    return words


def import_words(store: RestrictedWordStore, words: Iterable[str]) -> tuple[int, int]:
    """Add every word through the store; returns (added, already present)."""
    added = skipped = 0
    for w in tqdm(words, desc="importing", unit="word"):
        if store.add(w) is None:
            skipped += 1
        else:
            added += 1
    return added, skipped


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--in", dest="in_path", required=True,
                        help="raw txt input path, one word per line")
    parser.add_argument("--db", dest="db_url",
                        help="database url (defaults to DATABASE_URL / DB_* settings)")
    args = parser.parse_args()

    db_url = args.db_url or get_settings().database_url
    engine = make_engine(db_url)
    init_db(engine)
    store = RestrictedWordStore(make_session_factory(engine))

    words = load_words(Path(args.in_path))
    try:
        added, skipped = import_words(store, words)
    except StoreError as e:
        print(f"❌ import failed: {e} ({e.__cause__})")
        sys.exit(1)
    print(f"Imported {added} new words, {skipped} already present ➜ {db_url}")


if __name__ == "__main__":
    main()

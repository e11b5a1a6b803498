"""File-based JSON storage, one document per collection.

Data layout:
  data/
    stories.json       Story records, newest first
    characters.json    Character records, newest first

Each file holds a JSON array of camelCase records, pretty-printed with a
2-space indent and rewritten wholesale on every mutation (temp file +
atomic rename). There is no locking: two concurrent read-modify-write
requests can lose an update, the last rename wins.

Read failures are logged and yield an empty collection. Save failures are
logged and reported as False so the routes can answer 500.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    collection_path,
    data_dir,
    init_storage,
)

from .records import (  # noqa: F401
    get_record,
    list_records,
    save_records,
)

from .stories import (  # noqa: F401
    STORIES,
    get_stories,
    get_story,
    save_stories,
)

from .characters import (  # noqa: F401
    CHARACTERS,
    get_character,
    get_characters,
    save_characters,
)

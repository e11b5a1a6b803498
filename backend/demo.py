"""Demo data: a couple of stories and a character to click through."""

from backend import storage
from tell_tale.records import new_character, new_story

DEMO_STORIES = [
    (
        "The Lighthouse Keeper",
        "Every night for forty years, Mara climbed the hundred and twelve steps.\n"
        "The lamp had not failed once.\n"
        "On the night it did, a ship she had never seen came in from the fog.",
    ),
    (
        "Paper Boats",
        "The children folded their wishes into boats and set them on the river.\n"
        "Downstream, an old man fished them out one by one and read them all.",
    ),
]


def create_demo_data() -> None:
    """Replace stories and characters with the demo set."""
    stories = [new_story(title, content).to_json() for title, content in DEMO_STORIES]
    mara = new_character(
        "Mara Quill",
        origin="Hollow Point",
        birth_date="1931-03-14",
        backstory="Keeper of the Hollow Point light since she was nineteen.",
        traits=["stubborn", "patient", "superstitious"],
    )
    storage.save_stories(stories)
    storage.save_characters([mara.to_json()])

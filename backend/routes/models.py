"""Pydantic request models for API endpoints.

Create bodies are full records (`tell_tale.models.Story` / `Character`).
Update bodies are partial: only the fields present in the request are
merged onto the stored record. `id` and `createdAt` are not updatable and
are dropped if sent.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UpdateBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    updated_at: str | None = None

    def changes(self) -> dict:
        """camelCase dict of the fields actually sent."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class UpdateStory(UpdateBody):
    title: str | None = None
    content: str | None = None
    cover_image: str | None = None


class UpdateCharacter(UpdateBody):
    name: str | None = None
    origin: str | None = None
    birth_date: str | None = None
    backstory: str | None = None
    traits: list[str] | None = None
    image: str | None = None

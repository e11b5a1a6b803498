"""Character CRUD endpoints."""

from fastapi import APIRouter, HTTPException

from backend import storage
from tell_tale.models import Character

from .updates import merge_update
from .models import UpdateCharacter

router = APIRouter()


@router.get("/characters")
async def list_characters():
    """List all characters."""
    return storage.get_characters()


@router.post("/characters", status_code=201)
async def create_character(body: Character):
    """Store a client-built character at the front of the collection."""
    characters = storage.get_characters()
    if any(c.get("id") == body.id for c in characters):
        raise HTTPException(409, f"Character '{body.id}' already exists")
    char = body.to_json()
    characters.insert(0, char)
    if not storage.save_characters(characters):
        raise HTTPException(500, "Failed to create character")
    return char


@router.get("/characters/{character_id}")
async def get_character_endpoint(character_id: str):
    """Get a single character by id."""
    char = storage.get_character(character_id)
    if not char:
        raise HTTPException(404, "Character not found")
    return char


@router.put("/characters/{character_id}")
async def update_character(character_id: str, body: UpdateCharacter):
    """Merge the sent fields onto a stored character."""
    characters = storage.get_characters()
    for i, char in enumerate(characters):
        if char.get("id") == character_id:
            break
    else:
        raise HTTPException(404, "Character not found")
    characters[i] = merge_update(Character, char, body.changes())
    if not storage.save_characters(characters):
        raise HTTPException(500, "Failed to update character")
    return characters[i]


@router.delete("/characters/{character_id}")
async def delete_character(character_id: str):
    """Remove a character."""
    characters = storage.get_characters()
    new_list = [c for c in characters if c.get("id") != character_id]
    if len(new_list) == len(characters):
        raise HTTPException(404, "Character not found")
    if not storage.save_characters(new_list):
        raise HTTPException(500, "Failed to delete character")
    return {"success": True}

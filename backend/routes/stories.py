"""Story CRUD endpoints."""

import logging

from fastapi import APIRouter, HTTPException

from backend import storage
from tell_tale.models import Story

from .updates import merge_update
from .models import UpdateStory

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stories")
async def list_stories():
    """List all stories, newest first."""
    return storage.get_stories()


@router.post("/stories", status_code=201)
async def create_story(body: Story):
    """Store a client-built story at the front of the collection."""
    stories = storage.get_stories()
    if any(s.get("id") == body.id for s in stories):
        raise HTTPException(409, f"Story '{body.id}' already exists")
    story = body.to_json()
    stories.insert(0, story)
    if not storage.save_stories(stories):
        raise HTTPException(500, "Failed to create story")
    logger.info("Created story %s", body.id)
    return story


@router.get("/stories/{story_id}")
async def get_story(story_id: str):
    """Get a single story by id."""
    story = storage.get_story(story_id)
    if not story:
        raise HTTPException(404, "Story not found")
    return story


@router.put("/stories/{story_id}")
async def update_story(story_id: str, body: UpdateStory):
    """Merge the sent fields onto a stored story."""
    stories = storage.get_stories()
    for i, story in enumerate(stories):
        if story.get("id") == story_id:
            break
    else:
        raise HTTPException(404, "Story not found")
    stories[i] = merge_update(Story, story, body.changes())
    if not storage.save_stories(stories):
        raise HTTPException(500, "Failed to update story")
    return stories[i]


@router.delete("/stories/{story_id}")
async def delete_story(story_id: str):
    """Remove a story."""
    stories = storage.get_stories()
    new_list = [s for s in stories if s.get("id") != story_id]
    if len(new_list) == len(stories):
        raise HTTPException(404, "Story not found")
    if not storage.save_stories(new_list):
        raise HTTPException(500, "Failed to delete story")
    return {"success": True}

"""FastAPI API endpoints under /api.

Endpoint groups: health, stories, characters. Both record collections
expose the same shape:

  GET    /api/{collection}        list (newest first)
  POST   /api/{collection}        create; body is a full record with its id
  GET    /api/{collection}/{id}   single record
  PUT    /api/{collection}/{id}   shallow merge of the sent fields
  DELETE /api/{collection}/{id}   remove
"""

from fastapi import APIRouter

from .characters import router as characters_router
from .health import router as health_router
from .stories import router as stories_router

router = APIRouter()
router.include_router(health_router)
router.include_router(stories_router)
router.include_router(characters_router)

from fastapi import APIRouter

from .articles import router as articles_router
from .misc import router as misc_router

router = APIRouter()
router.include_router(misc_router)
router.include_router(articles_router)

__all__ = ["router"]

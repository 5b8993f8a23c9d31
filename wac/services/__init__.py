"""Service layer helpers"""

from .gateway import BackendGateway
from .news import NewsService, fallback_news
from .storage import LocalStorage
from .threads import BulkDeleteResult, ThreadService, ThreadStore, generate_thread_title

__all__ = [
    "BackendGateway",
    "NewsService",
    "fallback_news",
    "LocalStorage",
    "BulkDeleteResult",
    "ThreadService",
    "ThreadStore",
    "generate_thread_title",
]

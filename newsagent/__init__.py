"""
newsagent: news article body extraction and summarization.

Contains:
- core: settings, logging and text normalization
- extraction: static fetch, browser-render fallback and content location
- summarization: token budgeting, chunking, backend client and orchestration
- headlines: top-headlines listing client
- api / server: FastAPI routes and application wiring
"""

__version__ = "0.1.0"

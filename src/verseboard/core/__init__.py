"""
Core modules for verseboard.

- store: SQLite fact store and its query surface
- progress: coverage resolver, progress aggregator, activity ranker
- services: dashboard service, session and selection
- config: layered configuration
- api: FastAPI application
"""

"""Infrastructure layer — file I/O, host bookkeeping, file watching.

This layer depends on stdlib and third-party libs (watchdog, structlog).
It must never import from services, commands, or output.
"""

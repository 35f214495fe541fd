"""
Daily planner: time-boxed one-time and recurring tasks with a daily reset.

Subpackages:
- tasks/: models, task list, recurring registry, daily reset, planner, status ticker
- storage/: local SQLite records and the remote web-app task store
- core/: ports (Protocols), error taxonomy, app state
- cli/, connectors/: composition root, slash commands and the console REPL
"""

__version__ = "0.1.0"

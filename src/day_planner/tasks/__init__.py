"""
Task subsystem.

Components:
- task_models.py: data structures (Task, RecurringTemplate, TaskStatus, WriteResult)
- task_list.py: in-memory task list + live status derivation
- task_registry.py: recurring templates keyed by name
- daily_reset.py: once-a-day regeneration of recurring instances
- planner.py: orchestration of store writes and in-memory updates
- status_ticker.py: polling loop that reports status transitions
"""

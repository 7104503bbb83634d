"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStats) and time helpers
- task_store.py: in-memory task list with snapshot persistence
- task_scheduler.py: per-task asyncio reminder timers
- task_api.py: small high-level helpers that wire store + scheduler together
"""

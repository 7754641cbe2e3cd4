"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Category) and their stored shape
- placement.py: collision-avoiding positions on the 0-100 track
- task_registry.py: in-memory collection with write-through persistence
- export.py: CSV export of the whole collection
- task_api.py: small high-level helpers used by the rest of the app
"""

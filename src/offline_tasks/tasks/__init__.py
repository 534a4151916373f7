"""
Task subsystem.

Components:
- task_models.py: data structures (TaskSlot, TaskList, SlotState, ConnectionStatus)
- key_registry.py: persisted set of channels that still have pending tasks
- task_store.py: per-channel task lists, merge/overwrite policy, in-memory run snapshot
- connection.py: connectivity probe normalization + cached connection state
- handlers.py: channel -> handler mapping
- runner.py: connection gating, retry timer, dispatch and completion protocol
- offline_queue.py: the OfflineTasks facade wiring everything together
"""

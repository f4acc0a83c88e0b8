"""
Tracking subsystem.

Components:
- models.py: data structures (Task, Record, TrackingSession, Category, View)
- task_store.py: in-memory task collection persisted through a key-value port
- engine.py: the single-session start/stop state machine
- aggregate.py: pure view filtering and time rollups
- ticker.py: periodic read-only sampler for live display
"""

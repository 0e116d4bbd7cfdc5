"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority) + wire format
- task_store.py: in-memory authoritative collection + mutation API
- task_persistence.py: whole-collection load/save with seed fallback
- task_metrics.py: pure derived metrics (histograms, rates, score)
- task_io.py: JSON import/export
- task_api.py: small view helpers used by front-ends
"""

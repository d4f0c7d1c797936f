"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, Outcome)
- checks.py: readiness predicates over the peer connection
- priority.py: live ranking of pending tasks
- task_queue.py: pending tasks, re-ranked at peek time
- poll_trigger.py: debounced single-shot timer that drives polling
- strategies.py: task bodies that call into the peer connection
- task_scheduler.py: single-flight scheduler and poll loop
- task_api.py: public queueing facade (TaskQueue)
"""

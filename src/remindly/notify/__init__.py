"""
Reminder delivery.

- notifier.py: tiered Notifier (haptic -> system notification -> console alert)
- permissions.py: persisted tri-state notification permission
- backends.py: plyer-backed notification/vibration and the console alert
"""

"""Polling pipeline for announcement sources.

Pacing overview:
  - every rotation       - fetch each source once, in configured order
  - after each rotation  - idle 1 hour (idle_interval)
  - between items        - 5 seconds (item_interval)
  - between subscribers  - 1 second (recipient_interval)
  - failed network calls - 3 attempts, backoff 0.5s / 1s
"""

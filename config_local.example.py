# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for anything else. Only the names below are read.
"""

# Example: start with an empty board instead of the sample tasks
# SEED_SAMPLE_TASKS = False

# Example: load/seed storage without opening the interactive console
# CONSOLE_ENABLED = False

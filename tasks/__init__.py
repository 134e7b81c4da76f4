"""
tasks — per-owner task storage and the statements that enforce ownership.
"""

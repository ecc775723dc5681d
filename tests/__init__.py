"""
SnoozeSkip Test Suite
"""

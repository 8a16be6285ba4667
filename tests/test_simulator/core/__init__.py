"""
Core Tests

Command protocol, car state and the fixed-tick car runtime.
"""

"""
Protocol Tests

Serial wire format.
"""

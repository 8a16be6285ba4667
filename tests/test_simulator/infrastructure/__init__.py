"""
Infrastructure Tests

Serial link transport, monitor, broker and pacing.
"""

"""
Physics Engine Tests

Fixed-tick motion, collisions and floor sensor edge detection.
"""

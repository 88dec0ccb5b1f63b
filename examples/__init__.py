"""
Examples for travel-gate.

- quick_start: the application root with a couple of pages and cached reads
"""

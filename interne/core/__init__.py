"""
Interne Core
------------
Shared infrastructure: exceptions, logging, validation, paths and the clock.
"""

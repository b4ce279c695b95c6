"""
Interne
=======

A bookmark manager that re-surfaces saved links on a schedule.

A saved link (an entry) is hidden once it has been visited and comes
back after its review interval has elapsed. Entries can be tagged,
shared with other users through collections, and exported as JSON.

Packages:
    - interne.core: exceptions, logging, validation, paths, clock
    - interne.engine: availability, access rules, listings, tag weights
    - interne.database: models, managers, import/export, CLI
"""

__version__ = "1.0.0"

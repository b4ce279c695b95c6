"""
Interne Engine
--------------

Pure scheduling and access logic. Nothing in this package touches the
database or reads the clock on its own; callers pass in `now` and the
membership facts they loaded.

Modules:
    - availability: When a dismissed entry resurfaces, remaining/last-seen text
    - access: Who may view or mutate entries and collections
    - visibility: Filtered and ordered entry listings
    - tag_weights: Log-scaled tag cloud weights
    - constants: Field limits and tag cloud ranges
"""

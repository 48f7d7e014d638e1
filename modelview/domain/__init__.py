"""
Domain layer package.

Contains the entity-agnostic CRUD logic: capability descriptors, the
primary key codec, pagination resolution, partial-update merging,
storage ports and the error taxonomy. No framework imports, no IO.
"""

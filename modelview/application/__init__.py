"""
Application layer package.

Contains the CRUD dispatcher that orchestrates domain logic.
This layer depends on domain ports, never on infrastructure.
"""

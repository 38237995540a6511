"""Domain layer for finnexus application.

Services are imported from their modules directly (e.g.
``finnexus.domain.transaction``) so that the database layer can import
entities without pulling in the services that depend on it.
"""

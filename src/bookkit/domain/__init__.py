"""Domain layer for bookkit application.

Services are imported from their own modules; this package only groups them
so that the database layer can import ``bookkit.domain.entities`` without
pulling in the services that depend on it.
"""

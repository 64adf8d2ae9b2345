"""Collaborator modules used as dispatch targets by the test suite."""

PACKAGE = __name__

"""Development-only code: the test suite and its collaborator fixtures."""

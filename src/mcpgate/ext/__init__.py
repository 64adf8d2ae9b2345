"""Extensions: protocol bindings for the registry."""

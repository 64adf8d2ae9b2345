"""Runtime - execution-time concerns shared by the registry, dispatcher and transports."""

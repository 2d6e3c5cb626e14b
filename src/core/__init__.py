"""Domain models, naming and the error taxonomy."""

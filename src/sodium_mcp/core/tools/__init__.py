"""SodiumHQ tool handlers, one module per resource family."""

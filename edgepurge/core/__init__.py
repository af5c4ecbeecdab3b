"""Core: configuration, constants, lifespan, exception handlers, purge scope."""

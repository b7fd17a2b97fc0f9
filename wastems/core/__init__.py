"""Core: settings, exception handlers, lifespan, rate limiter, constants."""

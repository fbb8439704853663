"""Core — Context, engine, and logging."""

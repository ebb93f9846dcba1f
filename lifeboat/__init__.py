"""Lifeboat: hot-exit backup registry for editor sessions."""

"""Gatehouse: validated startup, auth routes and a client session helper."""

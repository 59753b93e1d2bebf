"""Notification services fed by the watcher on player count changes."""

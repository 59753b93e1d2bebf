"""Watcher package for the mcwatch polling service.

Holds the poll loop and its state, SRV resolution of the watched hostname,
CLI parsing, and logging setup used by the main runtime in `watcher.watcher`.
"""

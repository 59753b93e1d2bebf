"""mcwatch project package.

This repository groups the modules of a Minecraft server watcher: the
server list ping codec and status client (`mcping`), the polling runtime
(`watcher`), and the notification services it feeds on player count
changes (`notify`).
"""

"""Realtime infrastructure (Socket.IO broadcast relay).

The chat relay and the collaborative document relay share one Socket.IO
server; each namespace owns its own :class:`~collab_relay.realtime.hub.BroadcastHub`.
"""

"""Peers, channels, correlation, and frame routing.

Depends on the domain layer only.  All state lives in an injected
:class:`~sketchctx.relay.state.RelayState`; nothing here is a module
singleton.
"""

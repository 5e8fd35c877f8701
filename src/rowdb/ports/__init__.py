"""Ports - inbound (engine API) and outbound (storage) contracts."""

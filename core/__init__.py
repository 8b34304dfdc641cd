"""Collector core: wire protocol, history and registry."""

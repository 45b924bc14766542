"""Roster storage: YAML/JSON loader, hierarchy index, snapshot store.

Nothing in this package imports from services, commands, or output.
"""

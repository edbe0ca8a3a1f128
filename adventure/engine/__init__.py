"""Narrative engine boundary: the engine protocol, its factory and the adapter.

The engine itself is an opaque collaborator; nothing here knows its grammar or world model.
"""

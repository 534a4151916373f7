"""Ports and the event bus shared by the task components."""

"""Conversation orchestration core for the journaling assistant."""

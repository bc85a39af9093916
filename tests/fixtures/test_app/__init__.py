"""Embedding application used to exercise convention-based discovery."""

"""Yatra vehicle and tour booking backend."""

"""Civic reports backend."""

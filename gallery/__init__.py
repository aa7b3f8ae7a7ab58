"""Artwork gallery: a small personal catalog backed by a JSON file."""

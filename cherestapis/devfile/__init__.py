"""Devfile handling: layout normalization, parsing, validation and conversion."""

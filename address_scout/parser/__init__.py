"""Parsers for page markup and script text."""

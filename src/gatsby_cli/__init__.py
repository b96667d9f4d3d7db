"""Gatsby command-line dispatcher."""

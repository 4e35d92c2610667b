"""Data models for the back-office services.

This package contains the table metadata, the persisted entity models and
the validated request models.
"""

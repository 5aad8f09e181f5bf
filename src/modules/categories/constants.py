"""Catalog-wide defaults."""

DEFAULT_DESCRIPTION = "Default description"

NAME_MAX_LENGTH = 100

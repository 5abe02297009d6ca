"""Constants for radar routes."""

KEYWORD_NOT_FOUND_DETAIL = "Keyword not found"

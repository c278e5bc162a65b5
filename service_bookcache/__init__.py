"""Book Cache proxy service package."""

"""Command line tool for inspecting resource-cache files."""

"""Trimming pipeline: read the input, project it onto the rules, write the result."""

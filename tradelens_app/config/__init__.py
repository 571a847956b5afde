"""
Configuration module.

Default parameters, YAML-backed overrides and validation for the analysis
pipeline.
"""

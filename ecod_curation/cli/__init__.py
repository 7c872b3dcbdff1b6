"""
Command-line interface for ECOD curation tools.
"""

"""
Command-line interface for the dialogue engine
"""

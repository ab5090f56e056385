"""
Web server for dialogue documents
"""

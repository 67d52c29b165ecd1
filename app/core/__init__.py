"""
Core functionality for Africure Pharma API
(errors, exception handlers and request dependencies)
"""

"""
API routers for Africure Pharma API
"""

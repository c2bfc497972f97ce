"""
Route definitions for the API module.
"""

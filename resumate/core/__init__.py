"""
Core module - settings, logging and exceptions shared by all services.
"""

"""
FastAPI RESTful API for the Library Management System.

This module provides a REST API for:
- Book and author records stored in MongoDB
- Field-level validation of incoming payloads
- GitHub OAuth login with session-based write protection
"""

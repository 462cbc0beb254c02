"""
Authentication service for ArkiArt.

This module provides:
- Account registration, login and logout
- Opaque access tokens stored on the account
- An authentication gate for protected routes
"""

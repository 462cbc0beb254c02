"""
ArkiArt auth service: registration, login, logout and a token gate.
"""
__version__ = "0.1.0"

"""
CAM bearer token handling.
"""

from clccam.auth.claims import Claims
from clccam.auth.token import Token, load_token, token_from_string_or_file

__all__ = ["Claims", "Token", "load_token", "token_from_string_or_file"]

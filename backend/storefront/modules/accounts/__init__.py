"""
Accounts Module - Users and authentication.

Features:
- Registration of customer and admin accounts
- Password login with JWT access tokens
- User lookups used by orders, payments and Q&A
"""

from storefront.modules.accounts.service import UserService

__all__ = ["UserService"]

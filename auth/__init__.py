"""
auth — User authentication core.

Provides:
  • Password hashing (bcrypt, salted, fixed work factor)
  • Session token creation & verification (HS256 JWT)
  • ``AuthService``: register / login / protected-resource guard
  • Error taxonomy shared by every transport
"""

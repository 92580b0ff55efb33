"""
auth — User authentication module.

Provides:
  • Session token creation & verification (HMAC-SHA256)
  • Password hashing (bcrypt)
  • Signup / Login / Profile API routes
  • ``AuthService`` orchestrating the above
"""

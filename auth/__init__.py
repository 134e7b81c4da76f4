"""
auth — User authentication module.

Provides:
  • Signed session token issuing & verification (``TokenService``)
  • Password hashing (bcrypt)
  • Register / Login API routes
  • ``get_current_claims`` FastAPI dependency
"""

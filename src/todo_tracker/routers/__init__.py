"""HTTP routers for the todo and admin endpoints."""

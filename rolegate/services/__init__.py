"""Business logic: users, roles, authentication and transaction audit."""

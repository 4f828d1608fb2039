"""Permission-and-session model: roles, tokens, passwords and guards."""

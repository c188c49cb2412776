"""Core module: user accounts, identity endpoints and view access control."""

"""contact-store CLI commands."""

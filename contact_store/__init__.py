"""contact-store: persistence layer for the contacts domain."""

"""Authentication components: service tokens and user login."""

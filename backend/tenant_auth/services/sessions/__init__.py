"""Session lifecycle: token issuance, refresh-session rotation and revocation."""

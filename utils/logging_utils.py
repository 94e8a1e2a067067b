def mask_token(token: str) -> str:
    """Pickup tokens are bearer credentials; only the first 6 chars go to logs."""
    if not token:
        return "<empty>"
    return token[:6] + "..."

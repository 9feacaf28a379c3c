"""Route modules for the CartRec API."""

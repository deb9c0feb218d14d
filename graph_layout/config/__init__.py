"""Runtime settings for the layout engines."""

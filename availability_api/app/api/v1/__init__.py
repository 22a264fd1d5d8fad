"""Version 1 of the Availability API."""

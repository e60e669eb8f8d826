"""Request middleware for the Pocketbook API."""

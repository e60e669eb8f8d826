"""HTTP routes for the Pocketbook API."""

"""Application services for npm-push."""

"""AI provider integrations."""

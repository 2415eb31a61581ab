"""Application services that wire the agent together."""

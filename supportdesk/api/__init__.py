"""FastAPI surface for the support agent."""

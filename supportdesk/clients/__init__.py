"""External collaborators: completion providers and knowledge sources."""

"""Content Radar: keyword gap queue, topic registry and pipeline run tracking."""

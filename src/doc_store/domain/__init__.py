"""Domain layer - log format, query language and result shaping."""

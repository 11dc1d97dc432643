"""Version models, ordering and latest-version resolution."""

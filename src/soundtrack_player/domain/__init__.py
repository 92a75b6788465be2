"""Domain layer - track list, media assets, stem mixes and the mixer model."""

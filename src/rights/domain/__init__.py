"""Domain layer shared by the rights marketplace packages."""

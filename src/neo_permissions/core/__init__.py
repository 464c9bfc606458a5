"""Core building blocks shared by every neo-permissions feature."""

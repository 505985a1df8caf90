"""Core building blocks shared by every hokku component."""

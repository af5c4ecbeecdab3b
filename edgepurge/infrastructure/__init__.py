"""Infrastructure layer: implementations of the application interfaces."""

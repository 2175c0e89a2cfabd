"""HTTP surface: webhook routes and the application factory."""

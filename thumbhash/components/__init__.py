"""Component data records."""

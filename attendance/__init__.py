"""Course attendance and meeting service."""

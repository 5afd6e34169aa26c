"""Travel history service: where someone has been, is, and is going next."""

"""POM model, I/O, property indirection and parent inheritance."""

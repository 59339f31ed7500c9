"""Analysis facade and host integration."""

"""Route modules for the web server."""

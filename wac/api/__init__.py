"""HTTP routers served to the web client."""

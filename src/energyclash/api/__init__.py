"""HTTP API for Energy Clash."""

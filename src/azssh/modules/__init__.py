"""Self-contained building blocks used by the azssh connect flow."""

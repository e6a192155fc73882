"""Event Quote Desk: quote engine and event manager API."""

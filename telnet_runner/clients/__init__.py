"""Protocol clients for the telnet runner."""

"""Domain services used by the HTTP routes and CLI commands.

Route handlers stay thin: they validate the payload, call into a service
and serialize the result.
"""

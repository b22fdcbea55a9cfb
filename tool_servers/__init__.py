"""Small stdio MCP tool servers: a greeting server and a Wolfram Alpha query server."""

# Replaced at release time; "xxx" marks a development build.
__version__ = "0.0.1"
__revision__ = "xxx"
